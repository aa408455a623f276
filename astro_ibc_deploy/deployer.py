"""
Code upload and instantiation through the node CLI.

Transactions are signed and broadcast by `<chain_binary> tx wasm ...` in
sync mode, then confirmed by polling the LCD until the tx is indexed.
"""

import json
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from .client import ChainClient, Wallet
from .config import Settings
from .constants import TX_CONFIRM_TIMEOUT, TX_POLL_INTERVAL
from .errors import DeploymentError


@dataclass(frozen=True)
class DeployResult:
    contract_address: str
    code_id: int
    store_tx_hash: str
    instantiate_tx_hash: str


def find_event_attribute(tx_response: Mapping[str, Any], event_type: str, key: str) -> Optional[str]:
    """First value of `key` in events of `event_type`, searching tx and log events."""
    events: List[Mapping[str, Any]] = list(tx_response.get("events") or [])
    for log in tx_response.get("logs") or []:
        events.extend(log.get("events") or [])

    for event in events:
        if event.get("type") != event_type:
            continue
        for attribute in event.get("attributes") or []:
            if attribute.get("key") == key and attribute.get("value"):
                return attribute["value"]
    return None


class ContractDeployer:
    """Stores a wasm file and instantiates it in two transactions."""

    def __init__(
        self,
        client: ChainClient,
        settings: Settings,
        runner: Callable = subprocess.run,
        sleep: Callable[[float], None] = time.sleep,
        timeout: float = TX_CONFIRM_TIMEOUT,
        poll_interval: float = TX_POLL_INTERVAL,
        log: Callable[[str], None] = print,
    ):
        self.client = client
        self.settings = settings
        self.runner = runner
        self.sleep = sleep
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.log = log

    def deploy(
        self,
        wallet: Wallet,
        admin: str,
        wasm_path: Path,
        init_msg: Mapping[str, Any],
        label: str,
    ) -> DeployResult:
        if not label:
            raise DeploymentError("Contract label is required for instantiation")

        code_id, store_hash = self.store_code(wallet, wasm_path)
        address, instantiate_hash = self.instantiate(wallet, code_id, init_msg, label, admin)

        return DeployResult(
            contract_address=address,
            code_id=code_id,
            store_tx_hash=store_hash,
            instantiate_tx_hash=instantiate_hash,
        )

    def store_code(self, wallet: Wallet, wasm_path: Path):
        wasm_path = Path(wasm_path)
        if not wasm_path.is_file():
            raise DeploymentError(f"Wasm file not found: {wasm_path}")

        self.log(f"[INFO] Uploading {wasm_path.name}...")
        tx = self._broadcast(wallet, ["tx", "wasm", "store", str(wasm_path)])

        code_id = find_event_attribute(tx, "store_code", "code_id")
        if code_id is None:
            raise DeploymentError(f"No code_id in store tx {tx.get('txhash')}")

        try:
            code_id = int(code_id)
        except ValueError as e:
            raise DeploymentError(f"Invalid code_id {code_id!r} in store tx {tx.get('txhash')}") from e

        self.log(f"[OK] Code id: {code_id}")
        return code_id, tx["txhash"]

    def instantiate(self, wallet: Wallet, code_id: int, init_msg: Mapping[str, Any], label: str, admin: str):
        try:
            msg = json.dumps(init_msg, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise DeploymentError(f"Init message for {label!r} is not valid JSON: {e}") from e

        args = ["tx", "wasm", "instantiate", str(code_id), msg, "--label", label]
        if admin:
            args += ["--admin", admin]
        else:
            args.append("--no-admin")

        self.log(f"[INFO] Instantiating code {code_id} as {label!r}...")
        tx = self._broadcast(wallet, args)

        address = find_event_attribute(tx, "instantiate", "_contract_address")
        if address is None:
            raise DeploymentError(f"No contract address in instantiate tx {tx.get('txhash')}")

        return address, tx["txhash"]

    def _tx_flags(self, wallet: Wallet) -> List[str]:
        flags = [
            "--from", wallet.key_name,
            "--keyring-backend", self.settings.keyring_backend,
            "--chain-id", self.client.chain_id,
            "--gas", "auto",
            "--gas-adjustment", self.settings.gas_adjustment,
            "--gas-prices", self.settings.gas_prices,
            "--broadcast-mode", "sync",
            "--output", "json",
            "-y",
        ]
        if self.settings.node_url:
            flags += ["--node", self.settings.node_url]
        return flags

    def _broadcast(self, wallet: Wallet, args: List[str]) -> Dict[str, Any]:
        cmd = [self.settings.chain_binary] + args + self._tx_flags(wallet)
        try:
            result = self.runner(cmd, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise DeploymentError(f"Chain binary not found: {self.settings.chain_binary}") from e
        except subprocess.CalledProcessError as e:
            raise DeploymentError(
                f"{' '.join(args[:3])} failed: {(e.stderr or e.stdout or '').strip()}"
            ) from e

        try:
            submitted = json.loads(result.stdout)
        except ValueError as e:
            raise DeploymentError(f"Unexpected CLI output: {result.stdout.strip()}") from e

        if submitted.get("code", 0) != 0:
            raise DeploymentError(f"Transaction rejected: {submitted.get('raw_log')}")

        tx_hash = submitted.get("txhash")
        if not tx_hash:
            raise DeploymentError("CLI output carries no txhash")

        return self.wait_for_tx(tx_hash)

    def wait_for_tx(self, tx_hash: str) -> Dict[str, Any]:
        """Poll the LCD until the tx is included, failing on a non-zero code."""
        waited = 0.0
        while True:
            tx = self.client.get_tx(tx_hash)
            if tx is not None:
                break
            if waited >= self.timeout:
                raise DeploymentError(f"Transaction {tx_hash} not confirmed after {self.timeout}s")
            self.sleep(self.poll_interval)
            waited += self.poll_interval

        if tx.get("code", 0) != 0:
            raise DeploymentError(f"Transaction {tx_hash} failed: {tx.get('raw_log')}")

        tx.setdefault("txhash", tx_hash)
        return tx

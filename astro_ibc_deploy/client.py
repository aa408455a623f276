"""
Chain access for the deployment scripts.

ChainClient talks to the LCD REST endpoint with requests. The signing
identity stays in the node CLI keyring; Wallet only names the key and
carries its address.
"""

import subprocess
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from .config import Settings
from .constants import LCD_REQUEST_TIMEOUT
from .errors import ConfigurationError, DeploymentError


@dataclass(frozen=True)
class Wallet:
    key_name: str
    address: str


class ChainClient:
    """Thin LCD client: chain identity, tx lookup and contract info."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.lcd_url = settings.lcd_url
        self.session = session or requests.Session()
        self._chain_id = None

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        """GET an LCD path. Returns None on 404."""
        url = f"{self.lcd_url}{path}"
        try:
            response = self.session.get(url, timeout=LCD_REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise DeploymentError(f"LCD request failed: {url}: {e}") from e

        if response.status_code == 404:
            return None

        try:
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            raise DeploymentError(f"LCD returned {response.status_code} for {url}") from e
        except ValueError as e:
            raise DeploymentError(f"LCD returned invalid JSON for {url}") from e

    @property
    def chain_id(self) -> str:
        if self._chain_id is None:
            info = self.get("/cosmos/base/tendermint/v1beta1/node_info") or {}
            chain_id = (info.get("default_node_info") or {}).get("network")
            if not chain_id:
                raise DeploymentError(f"Could not determine chain id from {self.lcd_url}")
            self._chain_id = chain_id
        return self._chain_id

    def get_tx(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """Return the tx_response for a hash, or None while it is not yet indexed."""
        result = self.get(f"/cosmos/tx/v1beta1/txs/{tx_hash}")
        if not result:
            return None
        return result.get("tx_response")

    def contract_info(self, address: str) -> Optional[Dict[str, Any]]:
        result = self.get(f"/cosmwasm/wasm/v1/contract/{address}")
        if not result:
            return None
        return result.get("contract_info")


def resolve_wallet_address(settings: Settings, runner: Callable = subprocess.run) -> str:
    if settings.wallet_address:
        return settings.wallet_address

    cmd = [
        settings.chain_binary, "keys", "show", settings.wallet_key, "-a",
        "--keyring-backend", settings.keyring_backend,
    ]
    try:
        result = runner(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Chain binary not found: {settings.chain_binary}") from e
    except subprocess.CalledProcessError as e:
        raise ConfigurationError(
            f"Cannot load key {settings.wallet_key!r}: {(e.stderr or '').strip()}"
        ) from e

    address = result.stdout.strip()
    if not address:
        raise ConfigurationError(f"Key {settings.wallet_key!r} has no address")
    return address


def new_client(
    settings: Settings,
    session: Optional[requests.Session] = None,
    runner: Callable = subprocess.run,
) -> Tuple[ChainClient, Wallet]:
    """Build the chain client and signing wallet for the configured network."""
    client = ChainClient(settings, session=session)
    wallet = Wallet(
        key_name=settings.wallet_key,
        address=resolve_wallet_address(settings, runner=runner),
    )
    return client, wallet


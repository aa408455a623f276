"""
Shared pytest fixtures for the deployment tests.

Provides sample chain configs, a temporary artifact store, a recording
deployer standing in for the chain, and fakes for the LCD session and the
node CLI.
"""

import json
import subprocess

import pytest
import requests

from astro_ibc_deploy.artifacts import ArtifactStore
from astro_ibc_deploy.client import Wallet
from astro_ibc_deploy.config import ChainConfigs, Settings
from astro_ibc_deploy.constants import CW20_ICS20_WASM, IBC_CONTROLLER_WASM, SATELLITE_WASM
from astro_ibc_deploy.deployer import DeployResult
from astro_ibc_deploy.errors import DeploymentError

NETWORK_ID = "pisco-1"
MULTISIG = "terra1multisig0000000000000000000000000000000"
GOVERNANCE = "terra1governance000000000000000000000000000"
ASSEMBLY = "terra1assembly00000000000000000000000000000"


@pytest.fixture
def network_id():
    return NETWORK_ID


@pytest.fixture
def chain_configs_data():
    """Chain configs as they appear on disk, defaults left blank"""
    return {
        "generalInfo": {"multisig": MULTISIG},
        "cw20_ics20": {
            "admin": "",
            "initMsg": {
                "default_timeout": 900,
                "gov_contract": "",
                "allowlist": [],
            },
            "label": "Astroport CW20-ICS20",
        },
        "controller": {
            "admin": "",
            "initMsg": {"owner": "", "timeout": 60},
            "label": "Astroport IBC Controller",
        },
        "satellite": {
            "admin": "",
            "initMsg": {
                "owner": "",
                "astro_denom": "ibc/ASTRO",
                "transfer_channel": "channel-1",
                "main_maker": "terra1maker",
                "timeout": 60,
                "max_signal_outage": 1209600,
                "emergency_owner": "",
            },
            "label": "Astroport Satellite",
        },
    }


@pytest.fixture
def configs(chain_configs_data):
    return ChainConfigs.from_dict(chain_configs_data)


@pytest.fixture
def configs_path(tmp_path, chain_configs_data):
    path = tmp_path / "chain_configs.json"
    path.write_text(json.dumps(chain_configs_data))
    return path


@pytest.fixture
def store(tmp_path):
    return ArtifactStore(tmp_path / "artifacts")


@pytest.fixture
def wasm_path(tmp_path):
    wasm_dir = tmp_path / "wasm"
    wasm_dir.mkdir()
    for name in (CW20_ICS20_WASM, IBC_CONTROLLER_WASM, SATELLITE_WASM):
        (wasm_dir / name).write_bytes(b"\x00asm")
    return wasm_dir


@pytest.fixture
def wallet():
    return Wallet(key_name="deployer", address="terra1deployer")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        lcd_url="http://lcd.test",
        wallet_key="deployer",
        wallet_address="terra1deployer",
        artifacts_path=tmp_path / "artifacts",
        wasm_path=tmp_path / "wasm",
    )


@pytest.fixture
def messages():
    """Collects log lines"""
    return []


@pytest.fixture
def log(messages):
    return messages.append


class RecordingDeployer:
    """Deployer double that records every call and hands out fresh addresses"""

    def __init__(self, fail_on: str = None):
        self.calls = []
        self.fail_on = fail_on

    def deploy(self, wallet, admin, wasm_path, init_msg, label):
        self.calls.append({
            "wallet": wallet,
            "admin": admin,
            "wasm_path": wasm_path,
            "init_msg": init_msg,
            "label": label,
        })
        if self.fail_on and wasm_path.name == self.fail_on:
            raise DeploymentError(f"instantiate failed for {label}")

        index = len(self.calls)
        return DeployResult(
            contract_address=f"terra1contract{index}",
            code_id=100 + index,
            store_tx_hash=f"STORE{index}",
            instantiate_tx_hash=f"INSTANTIATE{index}",
        )


@pytest.fixture
def deployer():
    return RecordingDeployer()


@pytest.fixture
def seed_record(store, network_id):
    """Write fields straight into the stored network record"""
    def seed(**fields):
        record = store.read(network_id)
        for field, address in fields.items():
            record.set(field, address)
        store.write(record, network_id)
        return record
    return seed


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """requests.Session double keyed by URL path"""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        for path, response in self.routes.items():
            if url.endswith(path):
                if isinstance(response, Exception):
                    raise response
                if isinstance(response, list):
                    return response.pop(0)
                return response
        return FakeResponse(404, {"code": 5, "message": "not found"})


@pytest.fixture
def fake_session():
    return FakeSession()


class FakeRunner:
    """subprocess.run double returning queued outputs"""

    def __init__(self, outputs=None):
        self.outputs = list(outputs or [])
        self.commands = []

    def __call__(self, cmd, capture_output=False, text=False, check=False):
        self.commands.append(cmd)
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return subprocess.CompletedProcess(cmd, 0, stdout=output, stderr="")


@pytest.fixture
def fake_runner():
    return FakeRunner()

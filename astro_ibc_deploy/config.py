"""
Static deployment configuration.

The chain configs file is loaded once into frozen values. Each deployment
step derives its own resolved copy through merge_defaults(), so no step
can leak defaults into another.
"""

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .constants import (
    DEFAULT_ARTIFACTS_PATH,
    DEFAULT_CHAIN_BINARY,
    DEFAULT_CHAIN_CONFIGS_PATH,
    DEFAULT_GAS_ADJUSTMENT,
    DEFAULT_GAS_PRICES,
    DEFAULT_KEYRING_BACKEND,
    DEFAULT_WASM_PATH,
)
from .errors import ConfigurationError


def is_unset(value: Any) -> bool:
    """Mirror `||=`: None and empty strings count as missing."""
    return value is None or value == ""


def merge_defaults(explicit: Mapping[str, Any], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a new dict where defaults only fill keys left unset in explicit."""
    merged = copy.deepcopy(dict(explicit))
    for key, value in defaults.items():
        if is_unset(value):
            continue
        if is_unset(merged.get(key)):
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass(frozen=True)
class GeneralInfo:
    multisig: str = ""


@dataclass(frozen=True)
class ResolvedContract:
    """Fully defaulted parameters handed to the deployer."""
    admin: str
    init_msg: Dict[str, Any]
    label: str


def _object(value: Any, key: str) -> Mapping[str, Any]:
    """A config section as a mapping; missing or blank loads as empty."""
    if is_unset(value):
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"Chain configs: {key} must be an object, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class ContractConfig:
    admin: str = ""
    label: str = ""
    raw_init_msg: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_dict(cls, data: Any, key: str = "contract") -> "ContractConfig":
        data = _object(data, key)
        init_msg = _object(data.get("initMsg"), f"{key}.initMsg")
        return cls(
            admin=data.get("admin") or "",
            label=data.get("label") or "",
            raw_init_msg=MappingProxyType(copy.deepcopy(dict(init_msg))),
        )

    @property
    def init_msg(self) -> Dict[str, Any]:
        """Deep copy of the configured init message."""
        return copy.deepcopy(dict(self.raw_init_msg))

    def resolve(self, admin: str = "", init_defaults: Optional[Mapping[str, Any]] = None) -> ResolvedContract:
        resolved_admin = self.admin if not is_unset(self.admin) else admin
        return ResolvedContract(
            admin=resolved_admin,
            init_msg=merge_defaults(self.raw_init_msg, init_defaults or {}),
            label=self.label,
        )


@dataclass(frozen=True)
class ChainConfigs:
    general_info: GeneralInfo
    cw20_ics20: ContractConfig
    controller: ContractConfig
    satellite: ContractConfig

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChainConfigs":
        general = _object(data.get("generalInfo"), "generalInfo")
        return cls(
            general_info=GeneralInfo(multisig=general.get("multisig") or ""),
            cw20_ics20=ContractConfig.from_dict(data.get("cw20_ics20"), "cw20_ics20"),
            controller=ContractConfig.from_dict(data.get("controller"), "controller"),
            satellite=ContractConfig.from_dict(data.get("satellite"), "satellite"),
        )

    def require_multisig(self) -> str:
        if is_unset(self.general_info.multisig):
            raise ConfigurationError(
                "Missing multisig: set generalInfo.multisig, the owner of the contracts"
            )
        return self.general_info.multisig


def load_chain_configs(path: Optional[Path] = None) -> ChainConfigs:
    """Load the static contract configuration from JSON."""
    path = Path(path or os.getenv("CHAIN_CONFIGS_PATH", DEFAULT_CHAIN_CONFIGS_PATH))
    if not path.exists():
        raise ConfigurationError(f"Chain configs not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read chain configs {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Chain configs {path} must be a JSON object")

    return ChainConfigs.from_dict(data)


@dataclass(frozen=True)
class Settings:
    """Environment driven settings for the node CLI and LCD access."""
    lcd_url: str
    wallet_key: str
    wallet_address: str = ""
    chain_binary: str = DEFAULT_CHAIN_BINARY
    node_url: str = ""
    keyring_backend: str = DEFAULT_KEYRING_BACKEND
    gas_prices: str = DEFAULT_GAS_PRICES
    gas_adjustment: str = DEFAULT_GAS_ADJUSTMENT
    artifacts_path: Path = DEFAULT_ARTIFACTS_PATH
    wasm_path: Path = DEFAULT_WASM_PATH

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        lcd_url = env.get("LCD_URL")
        if not lcd_url:
            raise ConfigurationError("LCD_URL not set")

        wallet_key = env.get("WALLET_KEY")
        if not wallet_key:
            raise ConfigurationError("WALLET_KEY not set")

        return cls(
            lcd_url=lcd_url.rstrip("/"),
            wallet_key=wallet_key,
            wallet_address=env.get("WALLET_ADDRESS", ""),
            chain_binary=env.get("CHAIN_BINARY", DEFAULT_CHAIN_BINARY),
            node_url=env.get("NODE_URL", ""),
            keyring_backend=env.get("KEYRING_BACKEND", DEFAULT_KEYRING_BACKEND),
            gas_prices=env.get("GAS_PRICES", DEFAULT_GAS_PRICES),
            gas_adjustment=env.get("GAS_ADJUSTMENT", DEFAULT_GAS_ADJUSTMENT),
            artifacts_path=Path(env.get("ARTIFACTS_PATH", DEFAULT_ARTIFACTS_PATH)),
            wasm_path=Path(env.get("WASM_PATH", DEFAULT_WASM_PATH)),
        )

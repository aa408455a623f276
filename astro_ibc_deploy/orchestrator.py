"""
Deployment sequence for the IBC contracts.

Every step is safe to rerun: a contract whose address is already in the
network record is skipped without touching the chain. Steps run strictly
in order and the first failure aborts the rest of the run.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Tuple

from .artifacts import ArtifactStore, NetworkRecord
from .client import Wallet
from .config import ChainConfigs, ContractConfig, ResolvedContract
from .constants import (
    ASSEMBLY_ADDRESS,
    CW20_ICS20_ADDRESS,
    CW20_ICS20_WASM,
    GOVERNANCE_ADDRESS,
    IBC_CONTROLLER_ADDRESS,
    IBC_CONTROLLER_WASM,
    SATELLITE_ADDRESS,
    SATELLITE_WASM,
)
from .errors import DependencyMissingError, PersistenceError


@dataclass(frozen=True)
class Dependency:
    """An address from the network record that feeds an init message key."""
    name: str
    record_field: str
    init_key: str
    required: bool = True


@dataclass(frozen=True)
class DeploymentStep:
    name: str
    record_field: str
    wasm_file: str
    config_key: str
    dependencies: Tuple[Dependency, ...] = ()
    multisig_keys: Tuple[str, ...] = ()

    def contract_config(self, configs: ChainConfigs) -> ContractConfig:
        return getattr(configs, self.config_key)

    def missing_dependencies(self, record: NetworkRecord) -> Tuple[Dependency, ...]:
        return tuple(
            dep for dep in self.dependencies
            if dep.required and not record.has(dep.record_field)
        )

    def resolve(self, configs: ChainConfigs, record: NetworkRecord) -> ResolvedContract:
        """Derive this step's parameters; explicit config values always win."""
        multisig = configs.require_multisig()

        defaults = {key: multisig for key in self.multisig_keys}
        for dep in self.dependencies:
            address = record.get(dep.record_field)
            if address:
                defaults[dep.init_key] = address

        return self.contract_config(configs).resolve(admin=multisig, init_defaults=defaults)


CW20_ICS20_STEP = DeploymentStep(
    name="CW20-ICS20",
    record_field=CW20_ICS20_ADDRESS,
    wasm_file=CW20_ICS20_WASM,
    config_key="cw20_ics20",
    dependencies=(
        Dependency("Governance", GOVERNANCE_ADDRESS, "gov_contract", required=False),
    ),
    multisig_keys=("gov_contract",),
)

IBC_CONTROLLER_STEP = DeploymentStep(
    name="IBC Controller",
    record_field=IBC_CONTROLLER_ADDRESS,
    wasm_file=IBC_CONTROLLER_WASM,
    config_key="controller",
    dependencies=(
        Dependency("Assembly", ASSEMBLY_ADDRESS, "assembly"),
    ),
    multisig_keys=("owner",),
)

SATELLITE_STEP = DeploymentStep(
    name="Satellite",
    record_field=SATELLITE_ADDRESS,
    wasm_file=SATELLITE_WASM,
    config_key="satellite",
    dependencies=(
        Dependency("IBC Controller", IBC_CONTROLLER_ADDRESS, "main_controller", required=False),
    ),
    multisig_keys=("owner", "emergency_owner"),
)

DEPLOYMENT_STEPS = (CW20_ICS20_STEP, IBC_CONTROLLER_STEP, SATELLITE_STEP)


def deploy_step(
    step: DeploymentStep,
    record: NetworkRecord,
    configs: ChainConfigs,
    deployer,
    wallet: Wallet,
    store: ArtifactStore,
    wasm_path: Path,
    log: Callable[[str], None] = print,
) -> str:
    """Deploy one contract unless the record already has it; return its address."""
    existing = record.get(step.record_field)
    if existing:
        log(f"[OK] {step.name} already deployed: {existing}")
        return existing

    missing = step.missing_dependencies(record)
    if missing:
        raise DependencyMissingError(step.name, missing[0].name)

    resolved = step.resolve(configs, record)

    log(f"[INFO] Deploying {step.name}...")
    result = deployer.deploy(
        wallet,
        resolved.admin,
        Path(wasm_path) / step.wasm_file,
        resolved.init_msg,
        resolved.label,
    )
    address = result.contract_address

    record.set(step.record_field, address)
    try:
        store.write(record, record.network_id)
    except PersistenceError as e:
        raise PersistenceError(
            f"{step.name} deployed at {address} but the record was not saved: {e}",
            network_id=record.network_id,
            field=step.record_field,
            address=address,
        ) from e

    log(f"[OK] {step.name} address: {address}")
    return address


def run_deployment(
    configs: ChainConfigs,
    network_id: str,
    deployer,
    wallet: Wallet,
    store: ArtifactStore,
    wasm_path: Path,
    steps: Optional[Sequence[DeploymentStep]] = None,
    log: Callable[[str], None] = print,
) -> Dict[str, str]:
    """Run every step in order. Returns the address of each contract by step name."""
    configs.require_multisig()

    addresses = {}
    for step in DEPLOYMENT_STEPS if steps is None else steps:
        record = store.read(network_id)
        addresses[step.name] = deploy_step(
            step, record, configs, deployer, wallet, store, wasm_path, log=log
        )
    return addresses

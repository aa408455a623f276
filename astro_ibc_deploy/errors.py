"""Errors raised while deploying the IBC contracts."""


class DeployScriptError(Exception):
    """Base class for every failure that aborts a deployment run."""


class ConfigurationError(DeployScriptError):
    """Required static configuration is missing or unreadable."""


class DependencyMissingError(DeployScriptError):
    """A prerequisite contract has no address in the network record."""

    def __init__(self, contract: str, dependency: str):
        self.contract = contract
        self.dependency = dependency
        super().__init__(
            f"Cannot deploy {contract}: please deploy the {dependency} contract first"
        )


class DeploymentError(DeployScriptError):
    """Code upload or instantiation failed on chain."""


class PersistenceError(DeployScriptError):
    """A contract was deployed but its address could not be saved."""

    def __init__(self, message: str, network_id: str, field: str, address: str):
        self.network_id = network_id
        self.field = field
        self.address = address
        super().__init__(message)

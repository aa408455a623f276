from pathlib import Path

DEFAULT_CHAIN_CONFIGS_PATH = Path("config/chain_configs.json")
DEFAULT_ARTIFACTS_PATH = Path("artifacts")
DEFAULT_WASM_PATH = Path("../artifacts")

# Compiled contracts
CW20_ICS20_WASM = "astroport_cw20_ics20.wasm"
IBC_CONTROLLER_WASM = "ibc_controller.wasm"
SATELLITE_WASM = "astro_satellite.wasm"

# Network record fields
GOVERNANCE_ADDRESS = "governanceAddress"
ASSEMBLY_ADDRESS = "assemblyAddress"
CW20_ICS20_ADDRESS = "cw20Ics20Address"
IBC_CONTROLLER_ADDRESS = "ibcControllerAddress"
SATELLITE_ADDRESS = "satelliteAddress"

# Node CLI defaults
DEFAULT_CHAIN_BINARY = "terrad"
DEFAULT_KEYRING_BACKEND = "test"
DEFAULT_GAS_PRICES = "0.15uluna"
DEFAULT_GAS_ADJUSTMENT = "1.5"

TX_CONFIRM_TIMEOUT = 60
TX_POLL_INTERVAL = 2
LCD_REQUEST_TIMEOUT = 10

#!/usr/bin/env python3
"""
Astroport IBC Deployment Script

Uploads and instantiates CW20-ICS20, the IBC controller and the satellite
on the chain behind LCD_URL. Addresses are saved to artifacts/<chain_id>.json
after each contract, so rerunning only deploys what is still missing.

Usage:
    python scripts/deploy.py

Environment variables:
    LCD_URL        - LCD REST endpoint of the target chain
    WALLET_KEY     - Key name in the node CLI keyring used to sign
    WALLET_ADDRESS - Address of WALLET_KEY (looked up in the keyring if unset)
    CHAIN_BINARY   - Node CLI, terrad by default
    NODE_URL       - RPC endpoint passed to the CLI as --node
    CHAIN_CONFIGS_PATH, ARTIFACTS_PATH, WASM_PATH - file locations
"""

import sys

from dotenv import load_dotenv

from astro_ibc_deploy.artifacts import ArtifactStore
from astro_ibc_deploy.client import new_client
from astro_ibc_deploy.config import Settings, load_chain_configs
from astro_ibc_deploy.deployer import ContractDeployer
from astro_ibc_deploy.errors import DeployScriptError, PersistenceError
from astro_ibc_deploy.orchestrator import run_deployment

load_dotenv()


def main():
    print("=" * 60)
    print("ASTROPORT IBC DEPLOYMENT")
    print("=" * 60)

    try:
        configs = load_chain_configs()
        multisig = configs.require_multisig()

        settings = Settings.from_env()
        client, wallet = new_client(settings)
        print(f"chainID: {client.chain_id} wallet: {wallet.address}")
        print(f"Owner multisig: {multisig}")

        deployer = ContractDeployer(client, settings)
        store = ArtifactStore(settings.artifacts_path)

        addresses = run_deployment(
            configs, client.chain_id, deployer, wallet, store, settings.wasm_path
        )
    except PersistenceError as e:
        print(f"\n[ERROR] {e}")
        print(f"[ERROR] {e.field} = {e.address} on {e.network_id} is deployed on chain but NOT recorded.")
        print("        Add it to the network record by hand before running again,")
        print("        otherwise the contract will be deployed a second time.")
        sys.exit(1)
    except DeployScriptError as e:
        print(f"\n[ERROR] {e}")
        sys.exit(1)

    print()
    print("=" * 60)
    print("DEPLOYMENT COMPLETE")
    print("=" * 60)
    for name, address in addresses.items():
        print(f"  {name:20} {address}")

    return addresses


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Deployment Verification Script

Checks that every contract in the network record exists on chain and
prints its code id, admin and label.

Usage:
    python scripts/verify_deployment.py
"""

import sys

from dotenv import load_dotenv

from astro_ibc_deploy.artifacts import ArtifactStore
from astro_ibc_deploy.client import ChainClient
from astro_ibc_deploy.config import Settings
from astro_ibc_deploy.errors import DeployScriptError

load_dotenv()


def verify_contract(client: ChainClient, field: str, address: str) -> bool:
    info = client.contract_info(address)
    if info is None:
        print(f"[FAIL] {field}: {address} not found on chain")
        return False

    print(f"[OK] {field}: {address}")
    print(f"       code_id: {info.get('code_id')}")
    print(f"       admin:   {info.get('admin') or '-'}")
    print(f"       label:   {info.get('label')}")
    return True


def main():
    print("=" * 50)
    print("Astroport IBC Deployment Verification")
    print("=" * 50)

    try:
        settings = Settings.from_env()
        client = ChainClient(settings)
        network_id = client.chain_id
        record = ArtifactStore(settings.artifacts_path).read(network_id)

        print(f"Network: {network_id}")
        print()

        fields = list(record)
        if not fields:
            print(f"[WARN] No contracts recorded for {network_id}")
            sys.exit(1)

        results = {field: verify_contract(client, field, record.get(field)) for field in fields if record.has(field)}
    except DeployScriptError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    print()
    if all(results.values()):
        print("Deployment verification PASSED!")
    else:
        print("Deployment verification FAILED!")
        sys.exit(1)

    return results


if __name__ == "__main__":
    main()

"""
Per-network record of deployed contract addresses.

Records are stored as `<artifacts_path>/<network_id>.json`, one file per
chain id, and rewritten in full after every successful deployment.
"""

import json
import os
from pathlib import Path
from typing import Dict, Iterator, Optional

from .constants import DEFAULT_ARTIFACTS_PATH
from .errors import ConfigurationError, PersistenceError


class NetworkRecord:
    """Contract addresses known for one network.

    Fields only ever go from empty to populated; a populated field marks
    its contract as deployed.
    """

    def __init__(self, network_id: str, fields: Optional[Dict[str, str]] = None):
        self.network_id = network_id
        self._fields = dict(fields or {})

    def get(self, field: str) -> Optional[str]:
        value = self._fields.get(field)
        return value or None

    def has(self, field: str) -> bool:
        return self.get(field) is not None

    def set(self, field: str, address: str):
        existing = self.get(field)
        if existing and existing != address:
            raise ValueError(
                f"{field} already recorded as {existing} on {self.network_id}, refusing to overwrite"
            )
        self._fields[field] = address

    def to_dict(self) -> Dict[str, str]:
        return dict(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __eq__(self, other):
        if not isinstance(other, NetworkRecord):
            return NotImplemented
        return self.network_id == other.network_id and self._fields == other._fields

    def __repr__(self):
        return f"NetworkRecord({self.network_id!r}, {self._fields!r})"


class ArtifactStore:
    """Reads and writes network records as JSON files."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or DEFAULT_ARTIFACTS_PATH)

    def _file_for(self, network_id: str) -> Path:
        return self.path / f"{network_id}.json"

    def read(self, network_id: str) -> NetworkRecord:
        """Return the stored record, or an empty one if none exists yet."""
        filepath = self._file_for(network_id)
        if not filepath.exists():
            return NetworkRecord(network_id)

        try:
            with open(filepath) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read network record {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Network record {filepath} must be a JSON object")

        return NetworkRecord(network_id, data)

    def write(self, record: NetworkRecord, network_id: str):
        """Persist the full record, replacing whatever was stored before."""
        filepath = self._file_for(network_id)
        tmp_path = filepath.with_suffix(".json.tmp")

        try:
            self.path.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w") as f:
                json.dump(record.to_dict(), f, indent=2)
            os.replace(tmp_path, filepath)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise PersistenceError(
                f"Failed to save network record {filepath}: {e}",
                network_id=network_id,
                field="",
                address="",
            ) from e

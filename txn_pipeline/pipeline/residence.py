"""Customer residence lookup used as the valid/suspicious baseline."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping

UNKNOWN_RESIDENCE = "unknown"


class ResidenceLookup(ABC):
    """Maps a user to the location on file for them."""

    @abstractmethod
    def residence(self, user: str) -> str | None:
        """Return the user's residence, or a sentinel/None when unknown."""
        ...

    def is_known(self, residence: str | None) -> bool:
        return residence is not None and residence != UNKNOWN_RESIDENCE


class StaticResidenceDirectory(ResidenceLookup):
    def __init__(self, residences: Mapping[str, str], unknown: str = UNKNOWN_RESIDENCE) -> None:
        self._residences = dict(residences)
        self._unknown = unknown

    def residence(self, user: str) -> str:
        return self._residences.get(user, self._unknown)

    def is_known(self, residence: str | None) -> bool:
        return residence is not None and residence != self._unknown

    def __len__(self) -> int:
        return len(self._residences)

    @classmethod
    def from_json_file(cls, path: str | Path, unknown: str = UNKNOWN_RESIDENCE) -> StaticResidenceDirectory:
        """Load a ``{"user": "location", ...}`` JSON object."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"residence file not found: {path}")
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}: invalid JSON: {exc}") from exc
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise ValueError(f"{path}: expected an object mapping user to location")
        return cls(data, unknown=unknown)

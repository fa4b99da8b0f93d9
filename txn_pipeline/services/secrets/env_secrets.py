from __future__ import annotations

import os

from txn_pipeline.services.secrets.interface import SecretsInterface


class EnvSecrets(SecretsInterface):
    """Process environment, with ``--env`` / ``--env-file`` values layered on top."""

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self._values = {**os.environ, **(overrides or {})}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

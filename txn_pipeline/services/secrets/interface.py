from abc import ABC, abstractmethod


class SecretsInterface(ABC):
    """Deployment settings: broker address, client id, exporter port.

    Implementations only supply raw lookups; the typed accessors treat an
    empty value the same as a missing one.
    """

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    def get_or_default(self, key: str, default: str) -> str:
        value = self.get(key)
        return default if value is None else value

    def _parsed(self, key: str, default, parse):
        raw = self.get(key)
        if raw is None or raw.strip() == "":
            return default
        try:
            return parse(raw)
        except ValueError:
            raise ValueError(f"Setting '{key}' is not a valid {parse.__name__}: {raw!r}") from None

    def get_float(self, key: str, default: float) -> float:
        return self._parsed(key, default, float)

    def get_int(self, key: str, default: int) -> int:
        return self._parsed(key, default, int)

from decimal import Decimal, InvalidOperation
from typing import Any


class ModuleConfig:
    """Module arguments as parsed from the command line.

    Values arrive already cast per ``module.json``; the typed getters also
    accept raw strings so modules can be built directly in tests.
    """

    def __init__(self, args: dict[str, Any]) -> None:
        self._args = dict(args)

    def get(self, key: str, default: Any = None) -> Any:
        return self._args.get(key, default)

    def require(self, key: str) -> Any:
        if key not in self._args:
            raise ValueError(f"Missing required argument: --{key}")
        return self._args[key]

    def get_int(self, key: str, default: int) -> int:
        return self._typed(key, default, int)

    def get_float(self, key: str, default: float) -> float:
        return self._typed(key, default, float)

    def get_decimal(self, key: str, default: Decimal) -> Decimal:
        return self._typed(key, default, lambda v: Decimal(str(v)))

    def _typed(self, key: str, default: Any, cast: Any) -> Any:
        value = self._args.get(key)
        if value is None:
            return default
        try:
            return cast(value)
        except (ValueError, InvalidOperation):
            raise ValueError(f"Invalid value for --{key}: {value!r}") from None

    def __contains__(self, key: str) -> bool:
        return key in self._args

    def __repr__(self) -> str:
        return f"ModuleConfig({self._args})"

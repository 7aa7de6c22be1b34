from __future__ import annotations

from dataclasses import dataclass

# Resolution codes accepted by the execution engine.
_SUPPORTED_CODES = ("c1m", "c2m", "c3m", "c5m", "c10m", "c15m", "c1h", "c4h")


@dataclass(frozen=True, slots=True)
class Timeframe:
    """
    Timeframe — backtest bar resolution tag.

    Representation:
    - `c5m` plain code, or `bnf.c5m` venue-namespaced code.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValueError(f"Timeframe requires str value, got {self.value!r}")
        normalized = self.value.strip()
        venue, separator, code = normalized.rpartition(".")
        if separator and not venue:
            raise ValueError(f"Timeframe venue prefix must be non-empty, got {normalized!r}")
        if code not in _SUPPORTED_CODES:
            raise ValueError(
                f"Unsupported timeframe={normalized!r}. Supported: {list(_SUPPORTED_CODES)}"
            )
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserId:
    """
    UserId — opaque owner identifier issued by the dashboard session layer.

    Docs:
      - docs/architecture/shared-kernel-primitives.md
    Related:
      - src/stratlab/contexts/strategy/domain/entities/strategy_record.py
      - src/stratlab/contexts/backtest/adapters/outbound/persistence/filesystem/
        source_artifact_store.py
    """

    value: str

    def __post_init__(self) -> None:
        """
        Validate and normalize wrapped identifier string.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Identifier format is owned by the session layer and is not parsed here.
        Raises:
            ValueError: If value is not a string or blank after stripping.
        Side Effects:
            Replaces `value` with stripped string.
        """
        if not isinstance(self.value, str):
            raise ValueError(f"UserId requires str value, got {self.value!r}")
        normalized = self.value.strip()
        if not normalized:
            raise ValueError("UserId requires non-empty value")
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value

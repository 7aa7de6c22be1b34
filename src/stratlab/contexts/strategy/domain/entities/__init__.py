from .strategy_record import (
    StrategyDraft,
    StrategyRecord,
    StrategyRecordStatus,
    is_strategy_record_status,
)

__all__ = [
    "StrategyDraft",
    "StrategyRecord",
    "StrategyRecordStatus",
    "is_strategy_record_status",
]

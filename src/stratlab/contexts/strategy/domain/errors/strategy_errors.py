from __future__ import annotations


class StrategyDomainError(ValueError):
    """
    Base deterministic domain error for Strategy Record bounded context.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/domain/entities/strategy_record.py
      - src/stratlab/contexts/strategy/application/use_cases/errors.py
    """


class StrategyValidationError(StrategyDomainError):
    """
    Raised when Strategy Record fields violate record invariants.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/domain/entities/strategy_record.py
      - src/stratlab/shared_kernel/primitives/timeframe.py
    """


class StrategyStatusTransitionError(StrategyDomainError):
    """
    Raised when a Strategy Record status transition is not allowed.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/domain/entities/strategy_record.py
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py
    """


class StrategyStorageError(StrategyDomainError):
    """
    Raised when Strategy Record storage adapter cannot complete an operation.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/application/ports/repositories/strategy_repository.py
      - src/stratlab/contexts/strategy/adapters/outbound/persistence/in_memory/
        strategy_repository.py
    """

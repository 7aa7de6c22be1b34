from __future__ import annotations

from datetime import datetime

from stratlab.contexts.strategy.application.ports.repositories import StrategyRepository
from stratlab.contexts.strategy.application.use_cases.errors import (
    map_strategy_exception,
    strategy_forbidden,
    strategy_not_found,
    validation_error,
)
from stratlab.contexts.strategy.domain.entities import StrategyRecord
from stratlab.platform.errors import StratlabError
from stratlab.shared_kernel.primitives import UserId


def ensure_utc_datetime(*, value: datetime, field_name: str) -> datetime:
    """
    Validate that datetime value is timezone-aware UTC and return it unchanged.

    Args:
        value: Datetime value to validate.
        field_name: Field label used in deterministic validation message.
    Returns:
        datetime: Same validated datetime object.
    Assumptions:
        Strategy timestamps are stored in UTC only.
    Raises:
        StratlabError: If datetime is naive or non-UTC.
    Side Effects:
        None.
    """
    offset = value.utcoffset()
    if value.tzinfo is None or offset is None:
        raise StratlabError(
            code="validation_error",
            message=f"{field_name} must be timezone-aware UTC datetime",
            details={},
        )
    if offset.total_seconds() != 0:
        raise StratlabError(
            code="validation_error",
            message=f"{field_name} must be UTC datetime",
            details={},
        )
    return value


def parse_user_id(*, raw_user_id: str, path: str = "query.user_id") -> UserId:
    """
    Convert raw owner identifier into `UserId` or raise canonical validation error.

    Args:
        raw_user_id: Raw identifier from request.
        path: Validation item path used in error details.
    Returns:
        UserId: Normalized owner identifier.
    Assumptions:
        Identifier format is opaque; only emptiness is checked.
    Raises:
        StratlabError: If identifier is blank.
    Side Effects:
        None.
    """
    try:
        return UserId(raw_user_id)
    except ValueError as error:
        raise validation_error(
            message="user_id is required",
            errors=({"path": path, "code": "required", "message": str(error)},),
        ) from error


def require_owned_strategy(
    *,
    repository: StrategyRepository,
    strategy_id: str,
    user_id: UserId,
) -> StrategyRecord:
    """
    Load record by id and enforce explicit owner-only visibility rule in use-case layer.

    Args:
        repository: Strategy repository port.
        strategy_id: Requested strategy identifier.
        user_id: Requesting owner identifier.
    Returns:
        StrategyRecord: Owned record snapshot.
    Assumptions:
        Missing records map to `not_found`, foreign records map to `forbidden`.
    Raises:
        StratlabError: If record is missing, forbidden, or storage mapping fails.
    Side Effects:
        Reads one record from storage.
    """
    normalized_id = strategy_id.strip()
    if not normalized_id:
        raise validation_error(
            message="strategy_id is required",
            errors=(
                {
                    "path": "strategy_id",
                    "code": "required",
                    "message": "strategy_id must be non-empty",
                },
            ),
        )
    try:
        record = repository.find_by_id(strategy_id=normalized_id)
    except Exception as error:  # noqa: BLE001
        raise map_strategy_exception(error=error) from error

    if record is None:
        raise strategy_not_found(strategy_id=normalized_id)
    if not record.is_owned_by(user_id=user_id):
        raise strategy_forbidden(strategy_id=normalized_id)
    return record

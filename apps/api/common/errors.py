"""
Shared API error handlers for StratlabError contract and deterministic 422 payloads.

Docs:
  - docs/architecture/api/api-errors-v1.md
  - docs/architecture/backtest/backtest-http-job-handler-v1.md
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from stratlab.platform.errors import StratlabError

log = logging.getLogger(__name__)

_STRATLAB_STATUS_BY_CODE: Mapping[str, int] = {
    "validation_error": 422,
    "not_found": 404,
    "forbidden": 403,
    "conflict": 409,
    "backtest_submission_failed": 502,
    "engine_unavailable": 502,
    "unexpected_error": 500,
}


def register_api_error_handlers(*, app: FastAPI) -> None:
    """
    Register global API handlers for StratlabError, request validation, and unhandled errors.

    Args:
        app: FastAPI application instance.
    Returns:
        None.
    Assumptions:
        Handlers are installed once during application startup.
    Raises:
        ValueError: If `app` dependency is missing.
    Side Effects:
        Mutates FastAPI exception-handler registry.
    """
    if app is None:  # type: ignore[truthy-bool]
        raise ValueError("register_api_error_handlers requires app")

    app.add_exception_handler(StratlabError, stratlab_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def stratlab_error_handler(request: Request, error: Exception) -> JSONResponse:
    """
    Convert StratlabError into deterministic JSON response payload.

    Args:
        request: Starlette request object used for log context.
        error: Raised StratlabError instance.
    Returns:
        JSONResponse: Response with contract payload `{"error": ...}`.
    Assumptions:
        Error status code is derived from StratlabError.code via stable mapping table.
    Raises:
        None.
    Side Effects:
        Logs 5xx responses (engine failures and unexpected errors).
    """
    stratlab_error = cast(StratlabError, error)
    status_code = _status_code_for_error_code(code=stratlab_error.code)
    if status_code >= 500:
        log.warning(
            "component=api status=error code=%s http_status=%s method=%s path=%s details=%s",
            stratlab_error.code,
            status_code,
            request.method,
            request.url.path,
            stratlab_error.details,
        )
    return JSONResponse(status_code=status_code, content=stratlab_error.to_payload())


def request_validation_error_handler(request: Request, error: Exception) -> JSONResponse:
    """
    Convert FastAPI RequestValidationError to canonical `validation_error` payload.

    Args:
        request: Starlette request object.
        error: Raised validation exception from FastAPI/Pydantic.
    Returns:
        JSONResponse: HTTP 422 payload with deterministically sorted `details.errors` list.
    Assumptions:
        Validation errors include `loc`, `type`, and `msg` attributes.
    Raises:
        None.
    Side Effects:
        None.
    """
    validation_error = cast(RequestValidationError, error)
    normalized_errors = _sorted_validation_errors(raw_errors=validation_error.errors())
    return stratlab_error_handler(
        request,
        StratlabError(
            code="validation_error",
            message="Validation failed",
            details={"errors": normalized_errors},
        ),
    )


def unhandled_error_handler(request: Request, error: Exception) -> JSONResponse:
    """Render any exception that escaped use-case mapping as `unexpected_error`."""
    log.exception(
        "component=api status=unhandled method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=error,
    )
    return stratlab_error_handler(
        request,
        StratlabError(
            code="unexpected_error",
            message="Unexpected server error",
            details={"reason": type(error).__name__},
        ),
    )


def _status_code_for_error_code(*, code: str) -> int:
    """Resolve HTTP status for error code; unknown codes are internal errors."""
    return _STRATLAB_STATUS_BY_CODE.get(code, 500)


def _sorted_validation_errors(*, raw_errors: Any) -> list[dict[str, str]]:
    """
    Convert raw FastAPI validation errors into list sorted by path, code, and message.

    Args:
        raw_errors: Raw iterable from FastAPI validation subsystem.
    Returns:
        list[dict[str, str]]: Sorted normalized validation items.
    Assumptions:
        Unknown raw shapes are stringified for deterministic payload stability.
    Raises:
        None.
    Side Effects:
        None.
    """
    if not isinstance(raw_errors, Sequence) or isinstance(raw_errors, (str, bytes, bytearray)):
        return []

    normalized_items: list[dict[str, str]] = []
    for raw_error in raw_errors:
        if not isinstance(raw_error, Mapping):
            normalized_items.append(
                {"path": "unknown", "code": "validation_error", "message": str(raw_error)}
            )
            continue
        normalized_items.append(
            {
                "path": _normalize_error_path(loc=raw_error.get("loc")),
                "code": _normalize_error_code(raw_type=raw_error.get("type")),
                "message": str(raw_error.get("msg", "Validation error")),
            }
        )

    return sorted(
        normalized_items,
        key=lambda item: (item["path"], item["code"], item["message"]),
    )


def _normalize_error_path(*, loc: Any) -> str:
    """
    Convert FastAPI/Pydantic `loc` into dot-delimited path, for example `body.date_range.from`.

    Discriminated union tags (`create`, `resubmit`) are kept as path segments.
    """
    if isinstance(loc, Sequence) and not isinstance(loc, (str, bytes, bytearray)):
        path_parts = [str(part) for part in loc]
        if path_parts:
            return ".".join(path_parts)
    if loc is None:
        return "unknown"
    return str(loc)


def _normalize_error_code(*, raw_type: Any) -> str:
    """Normalize Pydantic error type into stable code; `missing` becomes `required`."""
    if raw_type is None:
        return "validation_error"

    normalized = str(raw_type).strip().lower()
    if not normalized:
        return "validation_error"
    if normalized == "missing" or normalized.endswith(".missing"):
        return "required"
    return normalized

from __future__ import annotations

from typing import Any, Mapping, Sequence


class StratlabError(Exception):
    """
    StratlabError — error raised by use-cases and rendered by the API as `{"error": {...}}`.

    Docs:
      - docs/architecture/api/api-errors-v1.md
    Related:
      - apps/api/common/errors.py
      - src/stratlab/contexts/backtest/application/use_cases/errors.py
      - src/stratlab/contexts/strategy/application/use_cases/errors.py

    `code` selects the HTTP status in the API layer; `details` is converted once into
    JSON-compatible plain values with sorted keys, so payloads compare deterministically.
    Fields are exposed read-only; the instance itself stays a regular exception so that
    context managers and `raise ... from ...` can attach tracebacks and causes.
    """

    def __init__(
        self,
        *,
        code: str,
        message: str,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Validate error fields and convert details into plain JSON-compatible values.

        Args:
            code: Stable machine-readable error token.
            message: Human-readable summary.
            details: Optional context values (strategy id, failure reason, field errors).
        Returns:
            None.
        Assumptions:
            Non-JSON detail values (paths, enums, datetimes) are rendered with `str`.
        Raises:
            ValueError: If `code` or `message` is blank.
            TypeError: If `details` is not a mapping.
        Side Effects:
            None.
        """
        normalized_code = code.strip() if isinstance(code, str) else ""
        normalized_message = message.strip() if isinstance(message, str) else ""
        if not normalized_code:
            raise ValueError("StratlabError requires non-empty code")
        if not normalized_message:
            raise ValueError("StratlabError requires non-empty message")
        if details is not None and not isinstance(details, Mapping):
            raise TypeError("StratlabError details must be a mapping")

        super().__init__(normalized_code, normalized_message)
        self._code = normalized_code
        self._message = normalized_message
        self._details: dict[str, Any] = _plain_mapping(details or {})

    @property
    def code(self) -> str:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> dict[str, Any]:
        return dict(self._details)

    def __str__(self) -> str:
        return f"{self._code}: {self._message}"

    def __repr__(self) -> str:
        return f"StratlabError(code={self._code!r}, message={self._message!r})"

    def to_payload(self) -> dict[str, Any]:
        """Build API body `{"error": {"code", "message", "details"}}`."""
        return {
            "error": {
                "code": self._code,
                "message": self._message,
                "details": self.details,
            }
        }


def _plain_mapping(value: Mapping[Any, Any]) -> dict[str, Any]:
    return {
        str(key): _plain_value(item)
        for key, item in sorted(value.items(), key=lambda pair: str(pair[0]))
    }


def _plain_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return _plain_mapping(value)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_plain_value(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)

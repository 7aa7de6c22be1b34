from __future__ import annotations

import math

from stratlab.contexts.backtest.domain.entities import Trade, TradeLogReport, TradeSummary

_HEADER_SIGNATURE = ("id", "symbol")
_FIELD_COUNT = 10


def process_trade_log(raw_ledger: str) -> TradeLogReport:
    """
    Parse delimited engine trade ledger into per-symbol groups and ordered summaries.

    Parameters:
    - raw_ledger: ledger text, one trade per line, ten comma-separated positional fields:
      `id,symbol,entry_time,entry_price,stop_loss,exit_price,exit_time,pnl,pnl_percent,qty`.

    Returns:
    - `TradeLogReport` with trades grouped by symbol in first-seen order and one summary
      per symbol sorted by total pnl descending.

    Assumptions/Invariants:
    - First line is skipped when its first two tokens are `id,symbol` (case-insensitive).
    - Blank lines are ignored; `\r` line endings are tolerated.
    - Equal totals keep first-seen order; NaN totals sort last.

    Errors/Exceptions:
    - None. Malformed numerics become NaN (`sequence_id` becomes `None`).

    Side effects:
    - None.
    """
    lines = [line.strip() for line in raw_ledger.strip().splitlines()]
    if lines and _is_header(lines[0]):
        lines = lines[1:]

    grouped: dict[str, list[Trade]] = {}
    for line in lines:
        if not line:
            continue
        trade = parse_trade_line(line)
        grouped.setdefault(trade.symbol, []).append(trade)

    summaries = [_summarize(symbol=symbol, trades=trades) for symbol, trades in grouped.items()]
    return TradeLogReport(
        grouped_trades={symbol: tuple(trades) for symbol, trades in grouped.items()},
        summary=tuple(sorted(summaries, key=_summary_sort_key)),
    )


def parse_trade_line(line: str) -> Trade:
    """
    Parse one ledger line positionally without schema validation.

    Parameters:
    - line: one comma-separated ledger row.

    Returns:
    - `Trade` value; missing text fields are empty strings, extra fields are ignored.

    Assumptions/Invariants:
    - Fields are not quoted and contain no embedded commas.

    Errors/Exceptions:
    - None.

    Side effects:
    - None.
    """
    fields = [item.strip() for item in line.split(",")]
    if len(fields) < _FIELD_COUNT:
        fields.extend([""] * (_FIELD_COUNT - len(fields)))

    return Trade(
        sequence_id=_parse_int(fields[0]),
        symbol=fields[1],
        entry_time=fields[2],
        entry_price=_parse_float(fields[3]),
        stop_loss_price=_parse_float(fields[4]),
        exit_price=_parse_float(fields[5]),
        exit_time=fields[6],
        pnl_amount=_parse_float(fields[7]),
        pnl_percent=_parse_float(fields[8]),
        quantity=_parse_float(fields[9]),
    )


def _is_header(line: str) -> bool:
    tokens = tuple(token.strip().lower() for token in line.split(",")[: len(_HEADER_SIGNATURE)])
    return tokens == _HEADER_SIGNATURE


def _summarize(*, symbol: str, trades: list[Trade]) -> TradeSummary:
    total_pnl = sum((trade.pnl_amount for trade in trades), 0.0)
    return TradeSummary(
        symbol=symbol,
        total_trades=len(trades),
        total_pnl=total_pnl,
        avg_pnl=total_pnl / len(trades),
        total_abs_quantity=sum((abs(trade.quantity) for trade in trades), 0.0),
    )


def _summary_sort_key(summary: TradeSummary) -> tuple[bool, float]:
    # Stable sort: equal totals keep first-seen group order.
    if math.isnan(summary.total_pnl):
        return (True, 0.0)
    return (False, -summary.total_pnl)


def _parse_int(raw_value: str) -> int | None:
    try:
        return int(raw_value)
    except ValueError:
        pass
    parsed = _parse_float(raw_value)
    if math.isfinite(parsed):
        return int(parsed)
    return None


def _parse_float(raw_value: str) -> float:
    try:
        return float(raw_value)
    except ValueError:
        return math.nan

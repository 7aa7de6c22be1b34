"""
Shared Kernel primitives.

Re-exports the value objects shared by Strategy and Backtest contexts:

    from stratlab.shared_kernel.primitives import DateRange, Timeframe, UserId
"""

from .date_range import DateRange
from .timeframe import Timeframe
from .user_id import UserId

__all__ = [
    "DateRange",
    "Timeframe",
    "UserId",
]

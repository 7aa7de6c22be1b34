from .system_strategy_clock import SystemStrategyClock

__all__ = [
    "SystemStrategyClock",
]

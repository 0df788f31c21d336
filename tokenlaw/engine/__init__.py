"""Inflation rebalancer engine components."""

from .clock import Clock, ManualClock, system_clock
from .rebalancer import InflationRebalancer, clamp_weights

__all__ = [
    "Clock",
    "ManualClock",
    "system_clock",
    "InflationRebalancer",
    "clamp_weights",
]

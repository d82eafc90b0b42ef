"""Tick planning, sample collection and the polling loop."""

from .collector import SampleCollector
from .loop import SchedulerLoop
from .tick import TickMode, TickResult, plan_tick

__all__ = [
    "SampleCollector",
    "SchedulerLoop",
    "TickMode",
    "TickResult",
    "plan_tick",
]

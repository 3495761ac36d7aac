from .config import MistakeTypes, SimulationConfig, kcfg
from .engine import TypingEngine, TypingState
from .mistakes import MistakeType
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from .telemetry import MistakeRecord, TypingEvent, TypingStats
from .analysis import simulate_typing, summarize_typing
from .behaviors import type_in_element

__all__ = [
    "TypingEngine",
    "TypingState",
    "SimulationConfig",
    "MistakeTypes",
    "MistakeType",
    "MistakeRecord",
    "TypingEvent",
    "TypingStats",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "simulate_typing",
    "summarize_typing",
    "type_in_element",
    "kcfg",
]

from __future__ import annotations
from .keyboard import (
    TypingEngine,
    TypingState,
    SimulationConfig,
    MistakeTypes,
    ManualScheduler,
    simulate_typing,
    summarize_typing,
    type_in_element,
)

__all__ = [
    "TypingEngine",
    "TypingState",
    "SimulationConfig",
    "MistakeTypes",
    "ManualScheduler",
    "simulate_typing",
    "summarize_typing",
    "type_in_element",
]

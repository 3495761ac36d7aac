from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from .mistakes import MistakeType


@dataclass
class MistakeRecord:
    """A wrong keystroke and whether it has been backspaced and retyped."""

    kind: MistakeType
    original_char: str
    mistake_char: str
    position: int  # index into the target text
    corrected: bool = False
    realization_delay: float = 0.0  # ms between typing it and noticing it


@dataclass(frozen=True)
class TypingEvent:
    kind: str  # 'char' | 'backspace' | 'mistake' | 'correction' | 'pause' | 'resume'
    position: int
    timestamp: float  # scheduler time, ms
    char: Optional[str] = None
    mistake: Optional[MistakeRecord] = None


@dataclass
class TypingStats:
    total_characters: int = 0
    characters_typed: int = 0  # includes mistaken characters
    mistakes_made: int = 0
    mistakes_corrected: int = 0
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    current_wpm: float = 0.0
    average_char_delay: float = 0.0
    total_duration: float = 0.0  # active ms, paused time excluded
    paused_duration: float = 0.0


@dataclass
class EventRecorder:
    """Collects the engine's event log for inspection and summaries."""

    events: List[TypingEvent] = field(default_factory=list)
    seed: Optional[int] = None

    def log(
        self,
        kind: str,
        position: int,
        timestamp: float,
        *,
        char: Optional[str] = None,
        mistake: Optional[MistakeRecord] = None,
    ) -> None:
        self.events.append(TypingEvent(kind, position, timestamp, char, mistake))

    def count(self, kind: str) -> int:
        return sum(1 for event in self.events if event.kind == kind)

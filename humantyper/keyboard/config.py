from __future__ import annotations
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

from ..utils import clamp as _clamp, finite_or as _finite_or


class kcfg:
    # All durations in milliseconds
    BASE_SPEED = 80
    SPEED_VARIATION = 40  # +/- uniform jitter around BASE_SPEED
    MIN_CHAR_DELAY = 25

    # Punctuation and structure
    SENTENCE_PAUSE = 500
    COMMA_PAUSE = 200
    WORD_SPACE = 150
    LINE_BREAK = 800

    # Mistake handling
    REALIZATION_DELAY = 300
    REALIZATION_JITTER = 150
    MIN_REALIZATION_DELAY = 200
    CORRECTION_PAUSE = 250
    BACKSPACE_SPEED = 60

    # Human behavior
    THINKING_PAUSE = 400  # before complex words
    FATIGUE_INCREMENT = 0.5  # added per character, never decays within a run
    BURST_SPEED_MULTIPLIER = 0.6
    CONCENTRATION_PAUSE = 800

    # Shift / caps lock / number row / symbols
    SHIFT_HESITATION = 100
    CAPS_LOCK_ON_DELAY = 150
    CAPS_LOCK_OFF_DELAY = 100
    CAPS_SEQUENCE_THRESHOLD = 3
    NUMBER_ROW_PENALTY = 35
    SYMBOL_BASE_PENALTY = 25  # multiplied by the symbol's complexity tier
    SPECIAL_CHAR_MULTIPLIER = 1.2
    VOWEL_MULTIPLIER = 0.9
    MIN_FREQUENCY_MULTIPLIER = 0.7
    HAND_ALTERNATION_MULTIPLIER = 0.85

    # Probabilities
    MISTAKE_FREQUENCY = 0.03
    CONCENTRATION_LAPSE = 0.03
    BURST_TYPING = 0.15
    LOOK_AHEAD_CHANCE = 0.08
    OVERCORRECTION_RATE = 0.2

    # Mistake chance multipliers
    NUMBER_MISTAKE_FACTOR = 1.5
    SHIFT_MISTAKE_FACTOR = 1.2
    COMPLEX_SYMBOL_MISTAKE_FACTOR = 1.3
    SIMPLE_PUNCT_MISTAKE_FACTOR = 0.5
    LOOK_AHEAD_MISTAKE_FACTOR = 2.0

    # Scheduling
    IMMEDIATE_DELAY_MS = 30  # below this, run on the next loop tick
    THINKING_STATE_THRESHOLD_MS = 200  # longer waits surface as "thinking"
    COMPLETION_RECHECK_MS = 500


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MistakeTypes:
    """Which kinds of mistakes the engine may produce."""

    adjacent: bool = True
    random: bool = False
    double_char: bool = True
    common_typos: bool = True

    def merged(self, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "MistakeTypes":
        changes = dict(overrides or {}, **kwargs)
        known = {f.name for f in fields(self)}
        return replace(self, **{k: bool(v) for k, v in changes.items() if k in known})


# field name -> (floor, ceiling); ceiling None means unbounded
_NUMERIC_BOUNDS = {
    "speed": (0.0, None),
    "speed_variation": (0.0, None),
    "mistake_frequency": (0.0, 1.0),
    "sentence_pause": (0.0, None),
    "word_pause": (0.0, None),
    "thinking_pause": (0.0, None),
    "correction_pause": (0.0, None),
    "min_char_delay": (0.0, None),
    "backspace_speed": (0.0, None),
    "realization_delay": (0.0, None),
}


@dataclass(frozen=True)
class SimulationConfig:
    """Per-run settings of a TypingEngine.

    Durations are milliseconds. Invalid numbers never raise: values that are
    not finite numbers fall back to the field default, negative durations
    floor at 0 and ``mistake_frequency`` is clamped to [0, 1].
    """

    speed: float = kcfg.BASE_SPEED
    speed_variation: float = kcfg.SPEED_VARIATION
    mistake_frequency: float = kcfg.MISTAKE_FREQUENCY
    mistake_types: MistakeTypes = field(default_factory=MistakeTypes)
    fatigue_effect: bool = True
    concentration_lapses: bool = True
    overcorrection: bool = True
    sentence_pause: float = kcfg.SENTENCE_PAUSE
    word_pause: float = kcfg.WORD_SPACE
    thinking_pause: float = kcfg.THINKING_PAUSE
    correction_pause: float = kcfg.CORRECTION_PAUSE
    min_char_delay: float = kcfg.MIN_CHAR_DELAY
    backspace_speed: float = kcfg.BACKSPACE_SPEED
    realization_delay: float = kcfg.REALIZATION_DELAY
    debug: bool = False

    def __post_init__(self) -> None:
        defaults = {f.name: f.default for f in fields(self)}
        for name, (lo, hi) in _NUMERIC_BOUNDS.items():
            value = _finite_or(getattr(self, name), defaults[name])
            value = max(lo, value) if hi is None else _clamp(value, lo, hi)
            object.__setattr__(self, name, value)
        if not isinstance(self.mistake_types, MistakeTypes):
            types = self.mistake_types if isinstance(self.mistake_types, Mapping) else None
            object.__setattr__(self, "mistake_types", MistakeTypes().merged(types))

    @classmethod
    def from_value(cls, value: Any = None) -> "SimulationConfig":
        """Build a config from None, an existing config, or a partial mapping."""
        if isinstance(value, cls):
            return value
        return cls().merged(value if isinstance(value, Mapping) else None)

    def merged(self, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "SimulationConfig":
        """Return a copy with the given fields replaced; unknown keys are ignored."""
        changes = dict(overrides or {}, **kwargs)
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            log.debug("Ignoring unknown config keys: %s", ", ".join(unknown))
        accepted = {k: v for k, v in changes.items() if k in known}
        types = accepted.get("mistake_types")
        if isinstance(types, Mapping):
            accepted["mistake_types"] = self.mistake_types.merged(types)
        return replace(self, **accepted)

from __future__ import annotations
import random
from typing import Optional

from ..utils import random_uniform as _rand
from .config import SimulationConfig, kcfg
from .tables import (
    CLAUSE_SEPARATORS,
    LEFT_HAND_KEYS,
    LETTER_FREQUENCY,
    NUMBER_CHARS,
    RIGHT_HAND_KEYS,
    SENTENCE_ENDINGS,
    SPECIAL_CHARS,
    SYMBOL_COMPLEXITY,
    VOWELS,
)
from .utils import (
    _is_capital,
    _is_line_break,
    _needs_shift,
    caps_lock_info,
    is_complex_word,
    next_word,
)


def hand_for(ch: str) -> Optional[str]:
    """'left', 'right', or None for keys in neither hand map (space, Enter)."""
    key = ch.lower()
    if key in LEFT_HAND_KEYS:
        return "left"
    if key in RIGHT_HAND_KEYS:
        return "right"
    return None


def fatigue_step(config: SimulationConfig) -> float:
    """How much fatigue one typed character adds."""
    return kcfg.FATIGUE_INCREMENT if config.fatigue_effect else 0.0


def _shift_cost(text: str, index: int) -> float:
    ch = text[index]
    if _is_capital(ch):
        caps = caps_lock_info(text, index)
        if not caps.is_sequence:
            return kcfg.SHIFT_HESITATION
        if caps.is_first:
            return kcfg.CAPS_LOCK_ON_DELAY
        if caps.is_last:
            return kcfg.CAPS_LOCK_OFF_DELAY
        return 0.0
    if _needs_shift(ch):
        return kcfg.SHIFT_HESITATION
    return 0.0


def _structure_pause(text: str, index: int, config: SimulationConfig) -> float:
    ch = text[index]
    if ch in SENTENCE_ENDINGS:
        return config.sentence_pause
    if ch in CLAUSE_SEPARATORS:
        return kcfg.COMMA_PAUSE
    if _is_line_break(ch):
        return kcfg.LINE_BREAK
    if ch == " ":
        pause = config.word_pause
        upcoming = next_word(text, index)
        if upcoming and is_complex_word(upcoming):
            pause += config.thinking_pause
        return pause
    return 0.0


def compute_char_delay(
    text: str,
    index: int,
    config: SimulationConfig,
    *,
    last_hand: Optional[str] = None,
    fatigue: float = 0.0,
    rng: Optional[random.Random] = None,
) -> float:
    """
    Milliseconds to wait before committing text[index].

    Pure: reads the hand/fatigue snapshot it is given and never updates it;
    the caller advances ``last_hand`` (via hand_for) and ``fatigue`` (via
    fatigue_step) once the character is committed.
    """
    rng = rng or random
    ch = text[index]

    delay = config.speed + _rand(-config.speed_variation, config.speed_variation, rng)

    delay += _shift_cost(text, index)
    if ch in NUMBER_CHARS:
        delay += kcfg.NUMBER_ROW_PENALTY
    delay += kcfg.SYMBOL_BASE_PENALTY * SYMBOL_COMPLEXITY.get(ch, 0)

    if ch in SPECIAL_CHARS:
        delay *= kcfg.SPECIAL_CHAR_MULTIPLIER
    elif ch.lower() in VOWELS:
        delay *= kcfg.VOWEL_MULTIPLIER

    # Frequent letters are faster, but never below the floor multiplier
    frequency = LETTER_FREQUENCY.get(ch.lower(), 1.0)
    delay *= max(kcfg.MIN_FREQUENCY_MULTIPLIER, 1 - frequency / 100)

    hand = hand_for(ch)
    if hand is not None and last_hand is not None and hand != last_hand:
        delay *= kcfg.HAND_ALTERNATION_MULTIPLIER

    if config.fatigue_effect:
        delay += fatigue

    if rng.random() < kcfg.BURST_TYPING:
        delay *= kcfg.BURST_SPEED_MULTIPLIER

    delay += _structure_pause(text, index, config)

    return max(config.min_char_delay, delay)

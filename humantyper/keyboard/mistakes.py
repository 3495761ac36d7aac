from __future__ import annotations
import random
import string
from enum import Enum
from typing import List, Optional

from .config import SimulationConfig, kcfg
from .tables import (
    COMMON_ENDINGS,
    COMMON_TYPOS,
    NUMBER_CHARS,
    QWERTY_ADJACENT,
    SHIFT_CHARS,
    SPECIAL_CHARS,
    SYMBOL_COMPLEXITY,
)
from .utils import _is_line_break, _match_case, word_bounds


class MistakeType(str, Enum):
    ADJACENT = "adjacent"
    DOUBLE_CHAR = "double_char"
    RANDOM = "random"
    COMMON_TYPO = "common_typo"


_LOOK_AHEAD_TYPES = (MistakeType.COMMON_TYPO, MistakeType.ADJACENT)


def looks_ahead(text: str, index: int, rng: Optional[random.Random] = None) -> bool:
    """
    Small-chance "typing ahead" near common word-ending fragments.

    Fires only when the next few characters start (part of) a fragment such
    as "ing", "tion" or "ly", and then only with LOOK_AHEAD_CHANCE.
    """
    window = text[index : index + 4]
    if not window:
        return False
    near_ending = any(
        ending[: min(len(ending), len(window))] in window for ending in COMMON_ENDINGS
    )
    return near_ending and (rng or random).random() < kcfg.LOOK_AHEAD_CHANCE


def mistake_chance(ch: str, config: SimulationConfig, *, look_ahead: bool = False) -> float:
    chance = config.mistake_frequency
    tier = SYMBOL_COMPLEXITY.get(ch, 0)
    if ch in NUMBER_CHARS:
        chance *= kcfg.NUMBER_MISTAKE_FACTOR
    if ch in SHIFT_CHARS:
        chance *= kcfg.SHIFT_MISTAKE_FACTOR
    if tier >= 3:
        chance *= kcfg.COMPLEX_SYMBOL_MISTAKE_FACTOR
    if ch in SPECIAL_CHARS and tier <= 1:
        chance *= kcfg.SIMPLE_PUNCT_MISTAKE_FACTOR
    if look_ahead:
        chance *= kcfg.LOOK_AHEAD_MISTAKE_FACTOR
    return chance


def should_make_mistake(
    text: str,
    index: int,
    config: SimulationConfig,
    rng: Optional[random.Random] = None,
    *,
    look_ahead: bool = False,
) -> bool:
    ch = text[index]
    if index == 0 or ch == " " or _is_line_break(ch):
        return False
    chance = mistake_chance(ch, config, look_ahead=look_ahead)
    if chance <= 0:
        return False
    return (rng or random).random() < chance


def select_mistake_type(
    ch: str,
    config: SimulationConfig,
    rng: Optional[random.Random] = None,
    *,
    look_ahead: bool = False,
) -> MistakeType:
    rng = rng or random
    enabled = config.mistake_types
    kinds: List[MistakeType] = []
    if enabled.adjacent and ch.lower() in QWERTY_ADJACENT:
        kinds.append(MistakeType.ADJACENT)
    if enabled.random:
        kinds.append(MistakeType.RANDOM)
    if enabled.double_char:
        kinds.append(MistakeType.DOUBLE_CHAR)
    if enabled.common_typos:
        kinds.append(MistakeType.COMMON_TYPO)

    if look_ahead:
        preferred = [k for k in kinds if k in _LOOK_AHEAD_TYPES]
        if preferred:
            return rng.choice(preferred)
    return rng.choice(kinds) if kinds else MistakeType.ADJACENT


def _adjacent_char(ch: str, rng: random.Random) -> Optional[str]:
    neighbors = QWERTY_ADJACENT.get(ch.lower())
    if not neighbors:
        return None
    return _match_case(rng.choice(neighbors), ch)


def _common_typo_char(text: str, index: int) -> Optional[str]:
    bounds = word_bounds(text, index)
    if bounds is None:
        return None
    start, end = bounds
    typo = COMMON_TYPOS.get(text[start:end].lower())
    offset = index - start
    if typo is None or offset >= len(typo):
        return None
    return _match_case(typo[offset], text[index])


def generate_mistake_char(
    text: str,
    index: int,
    kind: MistakeType,
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """
    The wrong text typed instead of text[index], or None if the kind cannot
    produce a substitution for this character.

    Substituted letters keep the case of the original; DOUBLE_CHAR returns
    the character twice.
    """
    rng = rng or random
    ch = text[index]

    if kind is MistakeType.ADJACENT:
        return _adjacent_char(ch, rng)

    if kind is MistakeType.DOUBLE_CHAR:
        return ch + ch

    if kind is MistakeType.RANDOM:
        pool = [c for c in string.ascii_lowercase if c != ch.lower()]
        return _match_case(rng.choice(pool), ch)

    if kind is MistakeType.COMMON_TYPO:
        typo = _common_typo_char(text, index)
        if typo is not None and typo != ch:
            return typo
        return _adjacent_char(ch, rng)

    return None

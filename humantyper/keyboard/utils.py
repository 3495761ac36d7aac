from __future__ import annotations
import re
from typing import NamedTuple, Optional

from .config import kcfg
from .tables import COMMON_WORDS, LINE_BREAK_CHARS, SHIFT_CHARS

_CAPITALS = set("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
_WORD_CHARS = re.compile(r"\w")
_NEXT_WORD = re.compile(r"\s*(\w+)")


def _is_capital(ch: str) -> bool:
    return ch in _CAPITALS


def _is_line_break(ch: str) -> bool:
    return ch in LINE_BREAK_CHARS


def _needs_shift(ch: str) -> bool:
    return ch in SHIFT_CHARS


def _is_upper(ch: str) -> bool:
    """True for cased characters currently in upper case."""
    return ch != ch.lower() and ch == ch.upper()


def _match_case(ch: str, like: str) -> str:
    return ch.upper() if _is_upper(like) else ch.lower()


class CapsLockInfo(NamedTuple):
    is_sequence: bool
    is_first: bool
    is_last: bool


_NO_CAPS = CapsLockInfo(False, False, False)


def caps_lock_info(text: str, index: int) -> CapsLockInfo:
    """
    Decide whether text[index] belongs to a caps-lock run.

    A run is a stretch of capitals where single spaces between capitalised
    words are absorbed; it qualifies once it holds at least
    CAPS_SEQUENCE_THRESHOLD capitals. Only the first and last capital of a
    qualifying run pay the caps-lock on/off cost.
    """
    if not (0 <= index < len(text)) or not _is_capital(text[index]):
        return _NO_CAPS

    start = index
    while start > 0:
        prev = text[start - 1]
        if _is_capital(prev):
            start -= 1
        elif prev == " " and start >= 2 and _is_capital(text[start - 2]):
            start -= 1
        else:
            break

    end = index
    while end < len(text) - 1:
        nxt = text[end + 1]
        if _is_capital(nxt):
            end += 1
        elif nxt == " " and end + 2 < len(text) and _is_capital(text[end + 2]):
            end += 1
        else:
            break

    capitals = [i for i in range(start, end + 1) if _is_capital(text[i])]
    if len(capitals) < kcfg.CAPS_SEQUENCE_THRESHOLD:
        return _NO_CAPS
    return CapsLockInfo(True, index == capitals[0], index == capitals[-1])


def next_word(text: str, index: int) -> Optional[str]:
    """The word following position index (skipping leading whitespace)."""
    match = _NEXT_WORD.match(text, index + 1)
    return match.group(1) if match else None


def word_bounds(text: str, index: int) -> Optional[tuple]:
    """(start, end) of the word around index, or None if index is not in a word."""
    start = index
    while start > 0 and _WORD_CHARS.match(text[start - 1]):
        start -= 1
    end = index
    while end < len(text) and _WORD_CHARS.match(text[end]):
        end += 1
    if start == end:
        return None
    return start, end


def is_complex_word(word: str) -> bool:
    return len(word) > 7 or word.lower() not in COMMON_WORDS

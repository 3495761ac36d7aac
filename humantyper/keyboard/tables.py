"""Static lookup tables consulted by the timing and mistake models (US QWERTY)."""

from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Tuple

QWERTY_ADJACENT: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        # Top row
        "q": ("w", "a", "s"),
        "w": ("q", "e", "a", "s", "d"),
        "e": ("w", "r", "s", "d", "f"),
        "r": ("e", "t", "d", "f", "g"),
        "t": ("r", "y", "f", "g", "h"),
        "y": ("t", "u", "g", "h", "j"),
        "u": ("y", "i", "h", "j", "k"),
        "i": ("u", "o", "j", "k", "l"),
        "o": ("i", "p", "k", "l", ";"),
        "p": ("o", "[", "l", ";", "'"),
        "[": ("p", "]", ";", "'"),
        "]": ("[", "\\", "'"),
        # Home row
        "a": ("q", "w", "s", "z"),
        "s": ("q", "w", "e", "a", "d", "z", "x"),
        "d": ("w", "e", "r", "s", "f", "x", "c"),
        "f": ("e", "r", "t", "d", "g", "c", "v"),
        "g": ("r", "t", "y", "f", "h", "v", "b"),
        "h": ("t", "y", "u", "g", "j", "b", "n"),
        "j": ("y", "u", "i", "h", "k", "n", "m"),
        "k": ("u", "i", "o", "j", "l", "m", ","),
        "l": ("i", "o", "p", "k", ";", ",", "."),
        ";": ("o", "p", "[", "l", "'", ".", "/"),
        "'": ("p", "[", "]", ";", "/", "."),
        # Bottom row
        "z": ("a", "s", "x"),
        "x": ("z", "s", "d", "c"),
        "c": ("x", "d", "f", "v"),
        "v": ("c", "f", "g", "b"),
        "b": ("v", "g", "h", "n"),
        "n": ("b", "h", "j", "m"),
        "m": ("n", "j", "k", ","),
        ",": ("m", "k", "l", "."),
        ".": (",", "l", ";", "/"),
        "/": (".", ";", "'"),
        # Space bar sits under the bottom row
        " ": ("c", "v", "b", "n", "m"),
    }
)

# Typed from muscle memory; anything else after a space earns a thinking pause
COMMON_WORDS = frozenset(
    """
    the and for are but not you all can had her was one our out day get has him
    his how man new now old see two way who boy did its let put say she too use
    that with have this will your from they know want been good much some time
    very when come here just like long make many over such take than them well
    were
    """.split()
)

COMMON_TYPOS: Mapping[str, str] = MappingProxyType(
    {
        "the": "teh",
        "and": "adn",
        "for": "fro",
        "you": "yuo",
        "that": "taht",
        "this": "tihs",
        "with": "wiht",
        "have": "ahve",
        "from": "form",
        "they": "thye",
        "been": "bene",
        "than": "htan",
        "what": "waht",
        "your": "yuor",
        "when": "wehn",
        "there": "tehre",
        "their": "thier",
        "would": "woudl",
        "could": "coudl",
        "should": "shoudl",
        "through": "trhough",
        "because": "becasue",
        "before": "beofre",
        "after": "aftre",
        "where": "whree",
        "which": "whihc",
        "between": "betwene",
        "different": "differnet",
        "important": "importnat",
        "example": "exmaple",
        "without": "withuot",
        "another": "antoher",
        "development": "developement",
        "environment": "enviroment",
        "government": "goverment",
        "management": "managment",
        "information": "infromation",
        "available": "availabe",
        "business": "buisness",
        "complete": "compelte",
        "language": "langauge",
        "experience": "experiance",
        "position": "postion",
        "question": "quesiton",
        "remember": "remeber",
        "separate": "seperate",
        "something": "somehting",
        "together": "togehter",
        "understand": "udnerstand",
    }
)

SPECIAL_CHARS = frozenset("""!@#$%^&*()-_+=[]{}\\|;:'",.<>/?`~""")

# Characters that need SHIFT on a US layout (capitals included)
SHIFT_CHARS = frozenset("""ABCDEFGHIJKLMNOPQRSTUVWXYZ!@#$%^&*()_+{}|:"<>?~""")

NUMBER_CHARS = frozenset("0123456789")

# 1 = simple punctuation, 2 = medium reach, 3 = precise finger movement
SYMBOL_COMPLEXITY: Mapping[str, int] = MappingProxyType(
    {
        **dict.fromkeys(""".,?!;:'\"""", 1),
        **dict.fromkeys("-_()[]/", 2),
        **dict.fromkeys("@#$%^&*+={}\\|`~<>", 3),
    }
)

SENTENCE_ENDINGS = frozenset(".!?")
CLAUSE_SEPARATORS = frozenset(",;:")
LINE_BREAK_CHARS = frozenset(("\n", "\r\n", "\r"))

# Relative frequency in English text, percent
LETTER_FREQUENCY: Mapping[str, float] = MappingProxyType(
    {
        "e": 12.7, "t": 9.1, "a": 8.2, "o": 7.5, "i": 7.0, "n": 6.7, "s": 6.3,
        "h": 6.1, "r": 6.0, "d": 4.3, "l": 4.0, "c": 2.8, "u": 2.8, "m": 2.4,
        "w": 2.4, "f": 2.2, "g": 2.0, "y": 2.0, "p": 1.9, "b": 1.3, "v": 1.0,
        "k": 0.8, "j": 0.15, "x": 0.15, "q": 0.10, "z": 0.07,
    }
)

VOWELS = frozenset("aeiou")

LEFT_HAND_KEYS = frozenset("qwertasdfgzxcvb12345!@#$%")
RIGHT_HAND_KEYS = frozenset("""yuiophjkl;nm,./67890^&*()[]'\"""")

# Fragments people tend to type ahead of conscious attention
COMMON_ENDINGS = ("ing", "tion", "ly", "ed", "er", "est", "ness")

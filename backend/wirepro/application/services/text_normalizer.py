"""Text normalization and tokenization shared by every lexical matcher.

All matching in the diagnostic engine is lexical: both the request text and
the knowledge entries go through ``normalize`` before any comparison.
"""

import re
from collections.abc import Iterable

_ACCENTS = str.maketrans({
    "à": "a",
    "è": "e",
    "é": "e",
    "ì": "i",
    "ò": "o",
    "ù": "u",
    "ä": "a",
    "ö": "o",
    "ü": "u",
})

# Any non-word character separates tokens, typographic quotes included
_TOKEN_SPLIT = re.compile(r"[\W_]+")

MIN_TOKEN_LENGTH = 4


def normalize(text: object) -> str:
    """Lower-case ``text`` and strip the accents of the fixed accent map.

    Total (``None`` becomes "") and idempotent.
    """
    return str(text or "").lower().translate(_ACCENTS)


def tokenize(text: object) -> list[str]:
    """Normalized tokens of at least ``MIN_TOKEN_LENGTH`` characters, in order."""
    return [
        token
        for token in _TOKEN_SPLIT.split(normalize(text))
        if len(token) >= MIN_TOKEN_LENGTH
    ]


def find_matches(text: object, keywords: Iterable[str]) -> list[str]:
    """Keywords contained (as substrings) in the normalized text, keyword order kept."""
    haystack = normalize(text)
    return [kw for kw in keywords if normalize(kw) in haystack]


def contains_any(text: object, keywords: Iterable[str]) -> bool:
    haystack = normalize(text)
    return any(normalize(kw) in haystack for kw in keywords)

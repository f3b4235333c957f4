"""Lookup-key normalization for queried words."""

from __future__ import annotations

import re
import unicodedata

# Index lemmas join multi-word terms with underscores.
WORD_SEPARATOR = "_"

_WHITESPACE_RE = re.compile(
    r"[\s\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+"
)


def normalize_word(word: str) -> str:
    """NFC-compose, trim, and join whitespace runs with underscores.

    Case is preserved.
    """
    composed = unicodedata.normalize("NFC", word)
    return _WHITESPACE_RE.sub(WORD_SEPARATOR, composed.strip())

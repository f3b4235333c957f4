"""Tests for lookup-key normalization."""

import pytest

from wndb._normalize import normalize_word


def test_plain_word():
    assert normalize_word("test") == "test"


def test_multi_word():
    """Index lemmas join multi-word terms with underscores."""
    assert normalize_word("hot dog") == "hot_dog"


@pytest.mark.parametrize("word", [
    "hot\u00a0dog",
    "hot \t dog",
    "hot\u2009dog",
    "hot\u3000dog",
    "hot\u2028dog",
    "hot\u202f\u205fdog",
    "hot  dog",
])
def test_unicode_whitespace_runs(word):
    assert normalize_word(word) == "hot_dog"


@pytest.mark.parametrize("word", ["test\u00a0", " test", "\u3000test\n"])
def test_surrounding_whitespace_trimmed(word):
    assert normalize_word(word) == "test"


def test_canonical_composition():
    """A decomposed accent composes to the precomposed character."""
    assert normalize_word("cafe\u0301") == "caf\u00e9"


def test_case_preserved():
    assert normalize_word("Hot Dog") == "Hot_Dog"


def test_idempotent():
    once = normalize_word(" hot \u00a0dog ")
    assert once == "hot_dog"
    assert normalize_word(once) == once

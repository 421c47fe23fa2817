from __future__ import annotations

from typing import AbstractSet, FrozenSet, Iterable, Optional

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS as _SKLEARN_STOP_WORDS

ENGLISH_STOP_WORDS: FrozenSet[str] = frozenset(_SKLEARN_STOP_WORDS)


def load_stop_words(extra: Optional[Iterable[str]] = None) -> FrozenSet[str]:
    if not extra:
        return ENGLISH_STOP_WORDS
    return ENGLISH_STOP_WORDS | {word.lower() for word in extra}


def is_stop_word(token: str, stop_words: AbstractSet[str] = ENGLISH_STOP_WORDS) -> bool:
    return token.lower() in stop_words


__all__ = ['ENGLISH_STOP_WORDS', 'load_stop_words', 'is_stop_word']

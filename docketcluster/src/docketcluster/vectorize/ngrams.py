from __future__ import annotations

from collections import Counter
from typing import AbstractSet, Iterator, List, Optional, Sequence, Tuple

from docketcluster.text.stopwords import ENGLISH_STOP_WORDS, is_stop_word


def validate_orders(n: int, n_min: Optional[int] = None) -> Tuple[int, int]:
    n_min = n if n_min is None else n_min
    if n < 1 or n_min < 1:
        raise ValueError(f'N-gram orders must be positive, got n_min={n_min}, n={n}')
    if n_min > n:
        raise ValueError(f'n_min ({n_min}) cannot exceed n ({n})')
    return n_min, n


def iter_ngrams(tokens: Sequence[str], n: int, n_min: Optional[int] = None) -> Iterator[Tuple[str, ...]]:
    """Yield overlapping grams of every order in ``[n_min, n]`` as positional tuples."""
    n_min, n = validate_orders(n, n_min)
    for order in range(n_min, n + 1):
        for start in range(len(tokens) - order + 1):
            yield tuple(tokens[start:start + order])


def is_stopword_gram(gram: Sequence[str], stop_words: AbstractSet[str] = ENGLISH_STOP_WORDS) -> bool:
    # Only all-stopword grams are dropped; one content token keeps the phrase.
    return all(is_stop_word(token, stop_words) for token in gram)


def extract_ngrams(
    tokens: Sequence[str],
    n: int,
    *,
    n_min: Optional[int] = None,
    stop_words: AbstractSet[str] = ENGLISH_STOP_WORDS,
) -> List[str]:
    return [
        ' '.join(gram)
        for gram in iter_ngrams(tokens, n, n_min)
        if not (stop_words and is_stopword_gram(gram, stop_words))
    ]


def count_ngrams(
    tokens: Sequence[str],
    n: int,
    *,
    n_min: Optional[int] = None,
    stop_words: AbstractSet[str] = ENGLISH_STOP_WORDS,
) -> Counter:
    return Counter(extract_ngrams(tokens, n, n_min=n_min, stop_words=stop_words))


__all__ = ['validate_orders', 'iter_ngrams', 'is_stopword_gram', 'extract_ngrams', 'count_ngrams']

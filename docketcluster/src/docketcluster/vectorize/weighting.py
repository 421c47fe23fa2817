from __future__ import annotations

from enum import Enum

import numpy as np
from scipy import sparse


class WeightMeasure(str, Enum):
    TF = 'tf'
    IDF = 'idf'
    TFIDF = 'tfidf'

    @classmethod
    def parse(cls, value: 'WeightMeasure | str') -> 'WeightMeasure':
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace('-', '_')
        try:
            return _ALIASES[key]
        except KeyError:
            raise ValueError(f'Unknown weighting measure: {value!r}') from None


_ALIASES = {
    'tf': WeightMeasure.TF,
    'term_frequency': WeightMeasure.TF,
    'idf': WeightMeasure.IDF,
    'inverse_document_frequency': WeightMeasure.IDF,
    'tfidf': WeightMeasure.TFIDF,
    'tf_idf': WeightMeasure.TFIDF,
}


def _row_lengths(matrix: sparse.csr_matrix) -> np.ndarray:
    return np.diff(matrix.indptr)


def term_frequency(counts: sparse.csr_matrix) -> sparse.csr_matrix:
    """Count divided by the total number of grams in the document."""
    tf = counts.astype(np.float64, copy=True)
    totals = np.asarray(tf.sum(axis=1)).ravel()
    if tf.nnz:
        tf.data /= np.repeat(totals, _row_lengths(tf))
    return tf


def inverse_document_frequency(counts: sparse.csr_matrix) -> np.ndarray:
    """``ln(n_docs / docs containing gram)`` for every column."""
    n_docs = counts.shape[0]
    doc_freq = np.bincount(counts.indices, minlength=counts.shape[1]).astype(np.float64)
    with np.errstate(divide='ignore'):
        idf = np.log(n_docs / doc_freq)
    idf[doc_freq == 0] = 0.0
    return idf


def apply_measure(counts: sparse.csr_matrix, measure: WeightMeasure | str) -> sparse.csr_matrix:
    measure = WeightMeasure.parse(measure)
    counts = sparse.csr_matrix(counts)
    counts.sum_duplicates()
    if measure is WeightMeasure.TF:
        return term_frequency(counts)
    idf = inverse_document_frequency(counts)
    if measure is WeightMeasure.IDF:
        weights = counts.astype(np.float64, copy=True)
        weights.data = idf[weights.indices]
        return weights
    weights = term_frequency(counts)
    weights.data = weights.data * idf[weights.indices]
    return weights


__all__ = ['WeightMeasure', 'term_frequency', 'inverse_document_frequency', 'apply_measure']

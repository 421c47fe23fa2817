"""Document x n-gram matrix construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy import sparse

from docketcluster.data.loaders import validate_columns
from docketcluster.data.types import Document, NgramCell
from docketcluster.text.clean import tokenize
from docketcluster.text.stopwords import ENGLISH_STOP_WORDS
from docketcluster.vectorize.ngrams import count_ngrams, validate_orders
from docketcluster.vectorize.weighting import WeightMeasure, apply_measure

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.05
ID_COLUMN = 'docid'

Tokenizer = Callable[[str], Sequence[str]]
DocumentSource = Union[pd.DataFrame, Iterable[Union[Document, Tuple[str, str]]]]


@dataclass
class DocumentNgramMatrix:
    """Sparse weights keyed by (docid, gram).

    Rows follow the input document order; columns are the grams that survived
    stop word filtering and thresholding, sorted lexicographically. Absent
    cells are zero.
    """

    docids: List[str]
    grams: List[str]
    values: sparse.csr_matrix
    counts: sparse.csr_matrix
    measure: WeightMeasure
    threshold: float = DEFAULT_THRESHOLD

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    @property
    def n_grams(self) -> int:
        return len(self.grams)

    @property
    def is_empty(self) -> bool:
        return self.n_grams == 0

    def row(self, docid: str) -> Dict[str, float]:
        index = self.docids.index(docid)
        start, end = self.values.indptr[index], self.values.indptr[index + 1]
        return {
            self.grams[column]: float(weight)
            for column, weight in zip(self.values.indices[start:end], self.values.data[start:end])
        }

    def frame_columns(self) -> List[str]:
        """Gram column labels for :meth:`to_frame`.

        ``docid`` is reserved for the id column, so a gram spelled ``docid`` is
        renamed to ``docid_gram`` (with trailing underscores until unique).
        """
        if ID_COLUMN not in self.grams:
            return list(self.grams)
        taken = set(self.grams)
        renamed = f'{ID_COLUMN}_gram'
        while renamed in taken:
            renamed += '_'
        return [renamed if gram == ID_COLUMN else gram for gram in self.grams]

    def to_frame(self) -> pd.DataFrame:
        """Wide table: ``docid`` followed by one zero-filled column per gram."""
        frame = pd.DataFrame(self.values.toarray(), columns=self.frame_columns())
        frame.insert(0, ID_COLUMN, self.docids)
        return frame

    def to_cells(self) -> List[NgramCell]:
        coo = self.values.tocoo()
        counts = self.counts.tocsr()
        return [
            NgramCell(
                docid=self.docids[row],
                gram=self.grams[column],
                count=int(counts[row, column]),
                weight=float(weight),
            )
            for row, column, weight in zip(coo.row, coo.col, coo.data)
        ]


def _iter_documents(documents: DocumentSource) -> Iterable[Tuple[str, str]]:
    if isinstance(documents, pd.DataFrame):
        validate_columns(documents)
        for docid, text in zip(documents['docid'], documents['text_data']):
            yield str(docid), text if isinstance(text, str) else ''
        return
    for item in documents:
        if isinstance(item, Document):
            yield item.docid, item.text_data
        else:
            docid, text = item
            yield str(docid), text or ''


def build_document_ngram_matrix(
    documents: DocumentSource,
    n: int,
    *,
    n_min: Optional[int] = None,
    measure: WeightMeasure | str = WeightMeasure.TF,
    threshold: float = DEFAULT_THRESHOLD,
    tokenizer: Optional[Tokenizer] = None,
    stop_words: Optional[AbstractSet[str]] = None,
) -> DocumentNgramMatrix:
    n_min, n = validate_orders(n, n_min)
    measure = WeightMeasure.parse(measure)
    if threshold < 0:
        raise ValueError(f'Threshold must be non-negative, got {threshold}')
    tokenizer = tokenizer or tokenize
    stop_words = ENGLISH_STOP_WORDS if stop_words is None else stop_words

    docids: List[str] = []
    vocabulary: Dict[str, int] = {}
    rows: List[int] = []
    columns: List[int] = []
    data: List[int] = []
    for row, (docid, text) in enumerate(_iter_documents(documents)):
        docids.append(docid)
        counts = count_ngrams(tokenizer(text), n, n_min=n_min, stop_words=stop_words)
        for gram, count in counts.items():
            rows.append(row)
            columns.append(vocabulary.setdefault(gram, len(vocabulary)))
            data.append(count)
    if len(set(docids)) != len(docids):
        raise ValueError('docid values must be unique')

    counts = sparse.csr_matrix(
        (np.asarray(data, dtype=np.float64), (np.asarray(rows, dtype=np.int64), np.asarray(columns, dtype=np.int64))),
        shape=(len(docids), len(vocabulary)),
    )
    weights = apply_measure(counts, measure)

    keep = weights.data > threshold
    weights.data = np.where(keep, weights.data, 0.0)
    weights.eliminate_zeros()
    counts = counts.multiply(weights > 0).tocsr()

    surviving = np.bincount(weights.indices, minlength=weights.shape[1]) > 0
    grams_by_column = np.empty(len(vocabulary), dtype=object)
    for gram, column in vocabulary.items():
        grams_by_column[column] = gram
    kept_grams = grams_by_column[surviving]
    order = np.argsort(kept_grams.astype(str), kind='stable')
    column_index = np.flatnonzero(surviving)[order]

    logger.info(
        'Built %s matrix: %d documents, %d of %d grams above threshold %.3f',
        measure.value, len(docids), len(column_index), len(vocabulary), threshold,
    )
    return DocumentNgramMatrix(
        docids=docids,
        grams=[str(gram) for gram in grams_by_column[column_index]],
        values=weights[:, column_index].tocsr(),
        counts=counts[:, column_index].tocsr(),
        measure=measure,
        threshold=threshold,
    )


__all__ = ['DocumentNgramMatrix', 'build_document_ngram_matrix', 'DEFAULT_THRESHOLD']

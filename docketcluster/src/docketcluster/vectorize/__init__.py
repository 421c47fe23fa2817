from .matrix import DEFAULT_THRESHOLD, DocumentNgramMatrix, build_document_ngram_matrix
from .ngrams import extract_ngrams, is_stopword_gram
from .weighting import WeightMeasure

__all__ = [
    'DocumentNgramMatrix',
    'build_document_ngram_matrix',
    'DEFAULT_THRESHOLD',
    'extract_ngrams',
    'is_stopword_gram',
    'WeightMeasure',
]

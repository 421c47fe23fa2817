import numpy as np
import pandas as pd
import pytest
from scipy import sparse

from docketcluster.data.types import Document
from docketcluster.errors import InputSchemaError
from docketcluster.vectorize.matrix import build_document_ngram_matrix
from docketcluster.vectorize.ngrams import extract_ngrams, is_stopword_gram
from docketcluster.vectorize.weighting import WeightMeasure, apply_measure


def _make_documents():
    return [
        Document(docid='c1', text_data='Net neutrality rules protect an open internet.'),
        Document(docid='c2', text_data='I oppose the net neutrality repeal. Keep the internet open!'),
        Document(docid='c3', text_data='Title II regulation of the internet is government overreach.'),
    ]


def test_two_document_term_frequency_example():
    matrix = build_document_ngram_matrix(
        [('d1', 'the cat sat'), ('d2', 'the dog sat')], 2, measure='term-frequency', threshold=0,
    )
    assert matrix.grams == ['cat sat', 'dog sat', 'the cat', 'the dog']
    assert matrix.row('d1') == {'the cat': 0.5, 'cat sat': 0.5}
    assert matrix.row('d2') == {'the dog': 0.5, 'dog sat': 0.5}
    frame = matrix.to_frame()
    assert list(frame.columns) == ['docid', 'cat sat', 'dog sat', 'the cat', 'the dog']
    assert frame.loc[frame['docid'] == 'd1', 'the dog'].item() == 0.0


def test_every_gram_has_requested_order():
    matrix = build_document_ngram_matrix(_make_documents(), 3, measure='tf', threshold=0)
    assert matrix.grams
    assert all(len(gram.split(' ')) == 3 for gram in matrix.grams)


def test_ngram_range_mixes_orders():
    matrix = build_document_ngram_matrix([('d1', 'comments filed today')], 2, n_min=1, threshold=0)
    orders = {len(gram.split(' ')) for gram in matrix.grams}
    assert orders == {1, 2}


def test_stopword_filter_is_permissive():
    assert is_stopword_gram(('of', 'the'))
    assert not is_stopword_gram(('of', 'freedom'))
    grams = extract_ngrams(['of', 'the', 'internet'], 2)
    assert grams == ['the internet']


def test_stopword_filter_can_be_disabled():
    grams = extract_ngrams(['of', 'the', 'internet'], 2, stop_words=frozenset())
    assert grams == ['of the', 'the internet']


def test_term_frequency_rows_sum_to_at_most_one():
    unfiltered = build_document_ngram_matrix(_make_documents(), 2, measure='tf', threshold=0)
    sums = np.asarray(unfiltered.values.sum(axis=1)).ravel()
    assert np.allclose(sums, 1.0)
    filtered = build_document_ngram_matrix(_make_documents(), 1, measure='tf', threshold=0.1)
    assert np.all(np.asarray(filtered.values.sum(axis=1)).ravel() <= 1.0 + 1e-12)


def test_tfidf_of_universal_gram_is_zero():
    counts = sparse.csr_matrix(np.array([[1, 1, 0], [1, 0, 2]], dtype=float))
    weights = apply_measure(counts, WeightMeasure.TFIDF).toarray()
    assert np.all(weights[:, 0] == 0.0)
    assert weights[1, 2] == pytest.approx((2 / 3) * np.log(2))

    matrix = build_document_ngram_matrix(
        [('d1', 'spectrum auction'), ('d2', 'spectrum policy')], 1, measure='tfidf', threshold=0,
    )
    assert 'spectrum' not in matrix.grams
    assert matrix.row('d1') == {'auction': pytest.approx(0.5 * np.log(2))}


def test_idf_uses_natural_log_of_document_ratio():
    matrix = build_document_ngram_matrix(
        [('d1', 'broadband access'), ('d2', 'broadband prices'), ('d3', 'rural access')],
        1, measure='idf', threshold=0,
    )
    row = matrix.row('d1')
    assert row['access'] == pytest.approx(np.log(3 / 2))
    assert row['broadband'] == pytest.approx(np.log(3 / 2))
    assert matrix.row('d3')['rural'] == pytest.approx(np.log(3))


def test_threshold_keeps_only_weights_above_it():
    matrix = build_document_ngram_matrix(_make_documents(), 1, measure='tf', threshold=0.1)
    assert matrix.values.nnz
    assert np.all(matrix.values.data > 0.1)
    assert np.all(matrix.values.data >= 0)


def test_all_grams_filtered_returns_empty_matrix():
    matrix = build_document_ngram_matrix(_make_documents(), 2, measure='tf', threshold=0.99)
    assert matrix.is_empty
    assert matrix.shape == (3, 0)
    assert list(matrix.to_frame().columns) == ['docid']


def test_build_is_deterministic():
    first = build_document_ngram_matrix(_make_documents(), 2, measure='tfidf', threshold=0)
    second = build_document_ngram_matrix(_make_documents(), 2, measure='tfidf', threshold=0)
    assert first.grams == second.grams
    assert first.docids == second.docids == ['c1', 'c2', 'c3']
    assert (first.values != second.values).nnz == 0


def test_dataframe_input_and_cells():
    frame = pd.DataFrame({'docid': [10, 11], 'text_data': ['repeal the order', None]})
    matrix = build_document_ngram_matrix(frame, 1, threshold=0)
    assert matrix.docids == ['10', '11']
    cells = {(cell.docid, cell.gram): cell for cell in matrix.to_cells()}
    assert cells[('10', 'repeal')].count == 1
    assert cells[('10', 'order')].weight == pytest.approx(0.5)
    assert matrix.row('11') == {}


@pytest.mark.parametrize('columns', [['docid'], ['text_data'], ['id', 'text']])
def test_missing_columns_raise_schema_error(columns):
    frame = pd.DataFrame({column: ['x'] for column in columns})
    with pytest.raises(InputSchemaError):
        build_document_ngram_matrix(frame, 2)


def test_invalid_parameters_raise():
    with pytest.raises(ValueError):
        build_document_ngram_matrix([('d1', 'text')], 2, n_min=3)
    with pytest.raises(ValueError):
        build_document_ngram_matrix([('d1', 'text')], 0)
    with pytest.raises(ValueError):
        build_document_ngram_matrix([('d1', 'text')], 1, measure='bm25')
    with pytest.raises(ValueError):
        build_document_ngram_matrix([('d1', 'text')], 1, threshold=-0.1)
    with pytest.raises(ValueError):
        build_document_ngram_matrix([('d1', 'a b'), ('d1', 'c d')], 1)


def test_measure_aliases():
    assert WeightMeasure.parse('TF-IDF') is WeightMeasure.TFIDF
    assert WeightMeasure.parse('inverse-document-frequency') is WeightMeasure.IDF
    assert WeightMeasure.parse('term_frequency') is WeightMeasure.TF


def test_gram_spelled_docid_keeps_id_column():
    matrix = build_document_ngram_matrix([('d1', 'docid missing'), ('d2', 'other words')], 1, threshold=0)
    assert 'docid' in matrix.grams
    frame = matrix.to_frame()
    assert list(frame.columns) == ['docid', 'docid_gram', 'missing', 'words']
    assert frame['docid'].tolist() == ['d1', 'd2']
    assert frame['docid_gram'].tolist() == [0.5, 0.0]

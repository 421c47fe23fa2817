import numpy as np
import pandas as pd
import pytest

from docketcluster.clustering import runner
from docketcluster.clustering.cache import CsvClusterCache, MemoryClusterCache
from docketcluster.clustering.runner import run_clustering, to_assignments
from docketcluster.data.types import ASSIGNMENT_COLUMNS, NOISE_LABEL
from docketcluster.errors import DegenerateInputError
from docketcluster.vectorize.matrix import build_document_ngram_matrix


class StubClusterer:
    """Stands in for HDBSCAN: every other document is noise."""

    def __init__(self):
        self.calls = 0

    def __call__(self, values, min_cluster_size, metric):
        self.calls += 1
        n = values.shape[0]
        labels = np.array([NOISE_LABEL if i % 2 else 0 for i in range(n)])
        probabilities = np.where(labels == NOISE_LABEL, 0.0, 0.9)
        outlier_scores = np.full(n, 0.25)
        outlier_scores[0] = np.nan
        return labels, probabilities, outlier_scores


@pytest.fixture
def stub(monkeypatch):
    clusterer = StubClusterer()
    monkeypatch.setattr(runner, '_run_hdbscan', clusterer)
    return clusterer


def _make_matrix(texts):
    documents = [(f'doc-{i}', text) for i, text in enumerate(texts)]
    return build_document_ngram_matrix(documents, 2, measure='tf', threshold=0)


FIRST_TEXTS = [
    'save net neutrality now',
    'save net neutrality today',
    'repeal title ii regulation',
    'repeal title ii overreach',
]
SECOND_TEXTS = [
    'broadband in rural areas',
    'broadband prices keep rising',
    'consumers need competition',
]


def test_output_matches_input_rows(stub):
    matrix = _make_matrix(FIRST_TEXTS)
    result = run_clustering(matrix, 'word_2_tf', cache=MemoryClusterCache())
    assert list(result.columns) == ASSIGNMENT_COLUMNS
    assert result['docid'].tolist() == matrix.docids
    assert result['cluster'].tolist() == [0, NOISE_LABEL, 0, NOISE_LABEL]
    assert result['outlier_scores'].tolist() == [0.0, 0.25, 0.25, 0.25]
    assert result['membership_prob'].between(0, 1).all()


def test_cache_is_idempotent_and_byte_identical(stub, tmp_path):
    cache = CsvClusterCache(tmp_path / '1000_42')
    matrix = _make_matrix(FIRST_TEXTS)
    run_clustering(matrix, 'word_2_tfidf', cache=cache)
    path = tmp_path / '1000_42' / 'clusters_word_2_tfidf.csv'
    assert path.exists()
    first_bytes = path.read_bytes()
    assert first_bytes.decode('utf-8').splitlines()[0] == 'docid,cluster,membership_prob,outlier_scores'

    second = run_clustering(matrix, 'word_2_tfidf', cache=cache)
    assert stub.calls == 1
    assert path.read_bytes() == first_bytes
    assert second['docid'].tolist() == matrix.docids


def test_stale_cache_returns_first_result(stub, caplog):
    cache = MemoryClusterCache()
    first = run_clustering(_make_matrix(FIRST_TEXTS), 'word_2_tf', cache=cache)
    second = run_clustering(_make_matrix(SECOND_TEXTS), 'word_2_tf', cache=cache)
    assert stub.calls == 1
    pd.testing.assert_frame_equal(first, second)
    assert 'do not match' in caplog.text


def test_content_addressed_keys_recompute_on_new_input(stub):
    cache = MemoryClusterCache()
    first = run_clustering(_make_matrix(FIRST_TEXTS), 'word_2_tf', cache=cache, content_addressed=True)
    second = run_clustering(_make_matrix(SECOND_TEXTS), 'word_2_tf', cache=cache, content_addressed=True)
    assert stub.calls == 2
    assert len(cache) == 2
    assert len(first) == 4
    assert len(second) == 3

    run_clustering(_make_matrix(FIRST_TEXTS), 'word_2_tf', cache=cache, content_addressed=True)
    assert stub.calls == 2


def test_empty_matrix_raises_degenerate_input(stub):
    matrix = build_document_ngram_matrix(
        [(f'doc-{i}', text) for i, text in enumerate(FIRST_TEXTS)], 2, measure='tf', threshold=0.99,
    )
    assert matrix.is_empty
    cache = MemoryClusterCache()
    with pytest.raises(DegenerateInputError):
        run_clustering(matrix, 'word_2_tf', cache=cache)
    assert stub.calls == 0
    assert len(cache) == 0


def test_no_documents_raises_degenerate_input(stub):
    frame = pd.DataFrame({'docid': [], 'feature': []})
    with pytest.raises(DegenerateInputError):
        run_clustering(frame, 'empty', cache=MemoryClusterCache())


def test_dataframe_features_and_assignments(stub):
    frame = pd.DataFrame({'docid': ['a', 'b', 'c'], 'x': [0.0, 0.1, 5.0], 'y': [1.0, 1.1, 3.0]})
    result = run_clustering(frame, 'daks_clark', cache=MemoryClusterCache(), min_cluster_size=2)
    assignments = to_assignments(result)
    assert [item.docid for item in assignments] == ['a', 'b', 'c']
    assert assignments[1].is_noise
    assert not assignments[0].is_noise
    assert assignments[0].outlier_score == 0.0


def test_duplicate_docids_in_dataframe_raise(stub):
    frame = pd.DataFrame({'docid': ['a', 'a', 'b'], 'x': [0.0, 0.1, 5.0]})
    cache = MemoryClusterCache()
    with pytest.raises(ValueError, match='unique'):
        run_clustering(frame, 'dupes', cache=cache, min_cluster_size=2)
    assert stub.calls == 0
    assert not cache.exists('dupes')


def test_wide_frame_keeps_gram_named_docid_as_feature(monkeypatch):
    seen = {}

    def _capture(values, min_cluster_size, metric):
        seen['shape'] = values.shape
        return np.zeros(len(values), dtype=int), np.ones(len(values)), np.zeros(len(values))

    monkeypatch.setattr(runner, '_run_hdbscan', _capture)
    matrix = build_document_ngram_matrix(
        [('d1', 'docid missing'), ('d2', 'docid found'), ('d3', 'other words')], 1, threshold=0,
    )
    result = run_clustering(matrix.to_frame(), 'word_1_tf', cache=MemoryClusterCache(), min_cluster_size=2)
    assert seen['shape'] == (3, matrix.n_grams)
    assert result['docid'].tolist() == ['d1', 'd2', 'd3']


def test_min_cluster_size_must_be_at_least_two(stub):
    with pytest.raises(ValueError):
        run_clustering(_make_matrix(FIRST_TEXTS), 'word_2_tf', cache=MemoryClusterCache(), min_cluster_size=1)


def test_memory_cache_returns_copies():
    cache = MemoryClusterCache()
    frame = pd.DataFrame({'docid': ['a'], 'cluster': [0], 'membership_prob': [1.0], 'outlier_scores': [0.0]})
    cache.write('model', frame)
    loaded = cache.read('model')
    loaded.loc[0, 'cluster'] = 7
    assert cache.read('model').loc[0, 'cluster'] == 0
    with pytest.raises(KeyError):
        cache.read('missing')


def test_csv_cache_sanitises_keys(tmp_path):
    cache = CsvClusterCache(tmp_path)
    assert cache.path('pos 3/tf').name == 'clusters_pos_3_tf.csv'
    assert not cache.exists('pos 3/tf')
    with pytest.raises(KeyError):
        cache.read('pos 3/tf')


def test_hdbscan_separates_duplicate_campaigns():
    pytest.importorskip('hdbscan')
    campaign = 'the unprecedented regulatory power the obama administration imposed signed {}'
    petition = 'protect net neutrality rules for everyone in {}'
    names = ['alice', 'bob', 'carol', 'dave', 'erin', 'frank']
    cities = ['boston', 'denver', 'austin', 'fresno', 'tampa', 'omaha']
    organic = [
        'my rural town has one slow provider',
        'streaming video costs keep going up',
        'small businesses depend on fair access',
        'please protect libraries and schools',
    ]
    texts = [campaign.format(name) for name in names] + [petition.format(city) for city in cities] + organic
    matrix = _make_matrix(texts)
    result = run_clustering(matrix, 'word_2_tf', cache=MemoryClusterCache(), min_cluster_size=3)
    assert len(result) == len(texts)
    assert result['docid'].tolist() == matrix.docids
    campaign_labels = set(result['cluster'][:6])
    assert len(campaign_labels) == 1
    assert campaign_labels != {NOISE_LABEL}
    assert (result['outlier_scores'] >= 0).all()

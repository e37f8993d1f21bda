from concurrent.futures import ThreadPoolExecutor

import pytest

from docsim.models.analysis import TermVector
from docsim.services.similarity_engine import (
    PairSimilarity,
    PairwiseSimilarityEngine,
    cosine_similarity,
    vector_similarity,
)


def make_vector(doc_index, sentence_index, **weights):
    return TermVector(doc_index=doc_index, sentence_index=sentence_index, weights=weights)


class TestCosineSimilarity:
    def test_self_similarity_is_exact(self):
        weights = {"ml": 0.4, "enables": 0.7, "analytics": 0.2}
        assert cosine_similarity(weights, weights) == 1.0
        assert cosine_similarity(weights, dict(weights)) == 1.0

    @pytest.mark.parametrize(
        "weights",
        [
            {"ml": 0.2231, "dog": 0.3109, "beta": 0.3109, "gamma": 0.3109, "delta": 0.3109, "cat": 0.2787},
            {"x": 1e-3, "y": 7.0, "z": 0.1},
            {"only": 0.6931471805599453},
        ],
    )
    def test_identical_vectors_score_exactly_one(self, weights):
        left = make_vector(0, 0, **weights)
        right = make_vector(1, 0, **dict(reversed(list(weights.items()))))
        assert vector_similarity(left, right) == 1.0
        assert vector_similarity(right, left) == 1.0

    def test_symmetric(self):
        a = {"x": 1.0, "y": 2.0}
        b = {"y": 1.0, "z": 5.0, "w": 0.5}
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_disjoint_terms(self):
        assert cosine_similarity({"a": 1.0}, {"b": 1.0}) == 0.0

    def test_zero_magnitude(self):
        assert cosine_similarity({}, {"a": 1.0}) == 0.0
        assert cosine_similarity({"a": 0.0}, {"a": 1.0}) == 0.0

    def test_within_unit_range(self):
        value = cosine_similarity({"a": 1.0, "b": 3.0}, {"a": 2.0, "c": 1.0})
        assert 0.0 <= value <= 1.0

    def test_uses_cached_magnitudes(self):
        a = make_vector(0, 0, ml=1.0, enables=1.0)
        b = make_vector(1, 0, ml=1.0)
        assert vector_similarity(a, b) == pytest.approx(1 / 2 ** 0.5)


class TestTermVector:
    def test_weights_are_read_only(self):
        vector = make_vector(0, 0, a=1.0)
        with pytest.raises(TypeError):
            vector.weights["a"] = 2.0

    def test_magnitude(self):
        vector = make_vector(0, 0, a=3.0, b=4.0)
        assert vector.squared_norm == 25.0
        assert vector.magnitude == pytest.approx(5.0)

    def test_weights_are_ordered_by_term(self):
        assert list(make_vector(0, 0, b=1.0, c=2.0, a=3.0).weights) == ["a", "b", "c"]


class TestPairwiseSimilarityEngine:
    @pytest.fixture
    def vectors(self):
        return [
            make_vector(0, 0, a=1.0),
            make_vector(0, 1, b=1.0),
            make_vector(1, 0, a=1.0, c=1.0),
            make_vector(2, 0, b=1.0),
        ]

    def test_only_cross_document_pairs(self, vectors):
        results = PairwiseSimilarityEngine().compare(vectors)
        assert [(r.source, r.target) for r in results] == [
            (0, 2), (0, 3), (1, 2), (1, 3), (2, 3),
        ]
        assert all(vectors[r.source].doc_index != vectors[r.target].doc_index for r in results)

    def test_scores(self, vectors):
        results = {(r.source, r.target): r.similarity for r in PairwiseSimilarityEngine().compare(vectors)}
        assert results[(1, 3)] == pytest.approx(1.0)
        assert results[(0, 3)] == 0.0

    def test_threaded_matches_serial(self, vectors):
        serial = PairwiseSimilarityEngine().compare(vectors)
        with ThreadPoolExecutor(max_workers=4) as executor:
            threaded = PairwiseSimilarityEngine(executor).compare(vectors)
        assert threaded == serial

    def test_min_similarity_drops_rows_early(self, vectors):
        results = PairwiseSimilarityEngine(min_similarity=0.5).compare(vectors)
        assert [(r.source, r.target) for r in results] == [(0, 2), (1, 3)]
        assert all(r.similarity >= 0.5 for r in results)

    def test_min_similarity_is_inclusive(self, vectors):
        results = PairwiseSimilarityEngine(min_similarity=1.0).compare(vectors)
        assert [(r.source, r.target, r.similarity) for r in results] == [(1, 3, 1.0)]

    def test_single_document_yields_nothing(self):
        vectors = [make_vector(0, 0, a=1.0), make_vector(0, 1, a=1.0)]
        assert PairwiseSimilarityEngine().compare(vectors) == []

    def test_too_few_vectors(self):
        assert PairwiseSimilarityEngine().compare([]) == []
        assert PairwiseSimilarityEngine().compare([make_vector(0, 0, a=1.0)]) == []

    def test_result_shape(self, vectors):
        first = PairwiseSimilarityEngine().compare(vectors)[0]
        assert isinstance(first, PairSimilarity)
        assert first.similarity == pytest.approx(1 / 2 ** 0.5)

"""Cross-document cosine similarity over sparse TF-IDF vectors."""
from __future__ import annotations

import math
from concurrent.futures import Executor
from typing import Iterable, List, Mapping, NamedTuple, Optional, Sequence

from docsim.models.analysis import TermVector, sum_of_squares


class PairSimilarity(NamedTuple):
    """Similarity of two sentences, addressed by their position in the flattened corpus."""

    source: int
    target: int
    similarity: float


def cosine_similarity(
    a: Mapping[str, float],
    b: Mapping[str, float],
    squared_norm_a: Optional[float] = None,
    squared_norm_b: Optional[float] = None,
) -> float:
    """
    dot(a, b) / sqrt(|a|^2 * |b|^2) for sparse vectors

    The smaller mapping is iterated and terms are looked up in the larger one.
    A zero-magnitude side yields 0.0; the result is clamped to [0, 1] since
    weights are non-negative.
    ``cosine_similarity(v, v)`` is exactly 1.0: the dot product and both squared
    norms accumulate over the same terms in the same order.
    """
    squared_norm_a = sum_of_squares(a) if squared_norm_a is None else squared_norm_a
    squared_norm_b = sum_of_squares(b) if squared_norm_b is None else squared_norm_b
    if squared_norm_a == 0.0 or squared_norm_b == 0.0:
        return 0.0

    if len(a) > len(b):
        a, b = b, a
    dot = 0.0
    for term, weight in a.items():
        other = b.get(term)
        if other is not None:
            dot += weight * other

    return max(0.0, min(1.0, dot / math.sqrt(squared_norm_a * squared_norm_b)))


def vector_similarity(a: TermVector, b: TermVector) -> float:
    """Cosine similarity of two sentence vectors using their cached squared norms."""
    return cosine_similarity(a.weights, b.weights, a.squared_norm, b.squared_norm)


class PairwiseSimilarityEngine:
    """
    Scores every sentence pair drawn from two different documents.

    ``vectors`` must be in corpus order (document by document, sentences in
    order). One task per source sentence compares it with every later sentence
    that belongs to a later document; rows are joined in submission order so the
    output never depends on scheduling. Pairs scoring below ``min_similarity``
    are dropped inside each row, so only candidate matches are ever held.
    """

    def __init__(self, executor: Optional[Executor] = None, min_similarity: float = 0.0):
        self.executor = executor
        self.min_similarity = min_similarity

    def compare(self, vectors: Sequence[TermVector]) -> List[PairSimilarity]:
        if len(vectors) < 2:
            return []

        next_document_start = self._next_document_starts(vectors)
        min_similarity = self.min_similarity

        def score_row(source: int) -> List[PairSimilarity]:
            left = vectors[source]
            row = []
            for target in range(next_document_start[source], len(vectors)):
                similarity = vector_similarity(left, vectors[target])
                if similarity >= min_similarity:
                    row.append(PairSimilarity(source, target, similarity))
            return row

        rows: Iterable[List[PairSimilarity]]
        if self.executor is None:
            rows = map(score_row, range(len(vectors)))
        else:
            rows = self.executor.map(score_row, range(len(vectors)))

        results: List[PairSimilarity] = []
        for row in rows:
            results.extend(row)
        return results

    @staticmethod
    def _next_document_starts(vectors: Sequence[TermVector]) -> List[int]:
        """For each position, the index of the first vector of the following document."""
        starts = [len(vectors)] * len(vectors)
        boundary = len(vectors)
        for position in range(len(vectors) - 1, -1, -1):
            if position + 1 < len(vectors) and vectors[position + 1].doc_index != vectors[position].doc_index:
                boundary = position + 1
            starts[position] = boundary
        return starts

"""Sparse TF-IDF building blocks.

``compute_tf`` and ``vectorize`` are per-sentence and safe to fan out;
``compute_idf`` is the one step that has to see every sentence of the request.
"""
from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Sequence

from docsim.models.analysis import TermVector


def compute_tf(tokens: Sequence[str]) -> Dict[str, float]:
    """Occurrence rate of each term in one sentence; empty input gives ``{}``."""
    total = len(tokens)
    if total == 0:
        return {}
    return {term: count / total for term, count in Counter(tokens).items()}


@dataclass(frozen=True, slots=True)
class IdfTable:
    """Smoothed IDF weights of one request's corpus.

    Built once per request and handed to every vectorizer task by reference.
    Terms never observed have no entry and weigh ``0.0``.
    """

    sentence_count: int
    weights: Mapping[str, float]

    def get(self, term: str) -> float:
        return self.weights.get(term, 0.0)

    def __contains__(self, term: object) -> bool:
        return term in self.weights

    def __len__(self) -> int:
        return len(self.weights)


def compute_idf(tf_maps: Iterable[Mapping[str, float]]) -> IdfTable:
    """
    idf(t) = ln((N + 1) / (df(t) + 1)) + 1

    N is the number of sentences and df(t) the number of sentences containing t,
    so every observed term gets a strictly positive weight.
    """
    document_frequency: Counter = Counter()
    sentence_count = 0
    for tf in tf_maps:
        sentence_count += 1
        document_frequency.update(tf.keys())

    weights = {
        term: math.log((sentence_count + 1) / (df + 1)) + 1.0
        for term, df in document_frequency.items()
    }
    return IdfTable(sentence_count=sentence_count, weights=MappingProxyType(weights))


def vectorize(
    doc_index: int,
    sentence_index: int,
    tf: Mapping[str, float],
    idf: IdfTable,
) -> TermVector:
    """TF-IDF weights for the sentence's own terms only."""
    weights = {term: value * idf.get(term) for term, value in tf.items()}
    return TermVector(doc_index=doc_index, sentence_index=sentence_index, weights=weights)

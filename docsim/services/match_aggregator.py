"""Threshold filtering, deterministic ordering and document-pair aggregation."""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from docsim.models.analysis import Document, DocumentPairScore, Sentence, SentenceMatch
from docsim.services.similarity_engine import PairSimilarity


def match_sort_key(match: SentenceMatch) -> Tuple[float, int, int, int, int]:
    """similarity desc, then document-pair encounter order, then source and target index"""
    return (
        -match.similarity,
        match.source_doc_index,
        match.target_doc_index,
        match.source_sentence_index,
        match.target_sentence_index,
    )


def filter_and_sort(
    results: Iterable[PairSimilarity],
    sentences: Sequence[Sentence],
    documents: Sequence[Document],
    threshold: float,
) -> List[SentenceMatch]:
    """
    Keep pairs with ``similarity >= threshold`` and order them deterministically.

    ``sentences`` is the flattened corpus the result positions refer to. The
    threshold is assumed to be validated already.
    """
    matches: List[SentenceMatch] = []
    for result in results:
        if result.similarity < threshold:
            continue
        source = sentences[result.source]
        target = sentences[result.target]
        matches.append(
            SentenceMatch(
                source_doc=documents[source.doc_index].label,
                source_sentence_index=source.index,
                source_sentence=source.text,
                target_doc=documents[target.doc_index].label,
                target_sentence_index=target.index,
                target_sentence=target.text,
                similarity=result.similarity,
                source_doc_index=source.doc_index,
                target_doc_index=target.doc_index,
            )
        )
    matches.sort(key=match_sort_key)
    return matches


class MatchAggregator:
    """Group retained matches by document pair and average their similarity."""

    def __init__(self) -> None:
        # dicts keep insertion order, which is the first-encounter order of each pair
        self._records: Dict[Tuple[int, int], Dict[str, object]] = {}

    def add(self, match: SentenceMatch) -> None:
        key = match.pair_key
        record = self._records.get(key)
        if record is None:
            record = {
                "doc_a": match.source_doc,
                "doc_b": match.target_doc,
                "total": 0.0,
                "match_count": 0,
            }
            self._records[key] = record
        record["total"] = float(record["total"]) + match.similarity
        record["match_count"] = int(record["match_count"]) + 1

    def extend(self, matches: Iterable[SentenceMatch]) -> "MatchAggregator":
        for match in matches:
            self.add(match)
        return self

    def build(self) -> List[DocumentPairScore]:
        """One score per pair with at least one match, highest first (stable on ties)."""
        scores = [
            DocumentPairScore(
                doc_a=str(record["doc_a"]),
                doc_b=str(record["doc_b"]),
                score=float(record["total"]) / int(record["match_count"]),
                match_count=int(record["match_count"]),
            )
            for record in self._records.values()
        ]
        scores.sort(key=lambda pair: pair.score, reverse=True)
        return scores


def aggregate_pair_scores(matches: Iterable[SentenceMatch]) -> List[DocumentPairScore]:
    return MatchAggregator().extend(matches).build()

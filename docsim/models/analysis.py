"""Dataclasses describing one analysis request, from sentences to the final report."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class Sentence:
    """One sentence of an uploaded document; ``text`` is kept verbatim for output."""

    doc_index: int
    index: int
    text: str


@dataclass(frozen=True, slots=True)
class Document:
    """A labelled document with index-stable sentences numbered from zero."""

    index: int
    label: str
    sentences: Tuple[Sentence, ...]

    @classmethod
    def build(cls, index: int, label: str, texts: Sequence[str]) -> "Document":
        sentences = tuple(
            Sentence(doc_index=index, index=position, text=text)
            for position, text in enumerate(texts)
        )
        return cls(index=index, label=label, sentences=sentences)

    def __len__(self) -> int:
        return len(self.sentences)


def sum_of_squares(weights: Mapping[str, float]) -> float:
    """Left-to-right sum of squared weights, in the mapping's iteration order."""
    total = 0.0
    for value in weights.values():
        total += value * value
    return total


@dataclass(frozen=True, slots=True)
class TermVector:
    """Sparse TF-IDF weights of a single sentence.

    ``weights`` is a read-only view, ordered by term, so vectors can be shared
    across worker threads and two vectors over the same terms are always walked
    in the same order. ``squared_norm`` is computed once at construction.
    """

    doc_index: int
    sentence_index: int
    weights: Mapping[str, float]
    squared_norm: float = field(init=False)

    def __post_init__(self) -> None:
        ordered = MappingProxyType(dict(sorted(self.weights.items())))
        object.__setattr__(self, "weights", ordered)
        object.__setattr__(self, "squared_norm", sum_of_squares(ordered))

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.squared_norm)

    def __len__(self) -> int:
        return len(self.weights)


@dataclass(frozen=True, slots=True)
class SentenceMatch:
    """A cross-document sentence pair whose similarity passed the threshold."""

    source_doc: str
    source_sentence_index: int
    source_sentence: str
    target_doc: str
    target_sentence_index: int
    target_sentence: str
    similarity: float
    source_doc_index: int
    target_doc_index: int

    @property
    def pair_key(self) -> Tuple[int, int]:
        """Unordered document-pair key (source always precedes target)."""
        return (self.source_doc_index, self.target_doc_index)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_doc": self.source_doc,
            "source_sentence_index": self.source_sentence_index,
            "source_sentence": self.source_sentence,
            "target_doc": self.target_doc,
            "target_sentence_index": self.target_sentence_index,
            "target_sentence": self.target_sentence,
            "similarity": self.similarity,
        }


@dataclass(frozen=True, slots=True)
class DocumentPairScore:
    """Mean similarity of the retained matches between two documents."""

    doc_a: str
    doc_b: str
    score: float
    match_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"docA": self.doc_a, "docB": self.doc_b, "score": self.score}


@dataclass(frozen=True, slots=True)
class AnalysisMetadata:
    documents_count: int
    total_sentences: int
    processing_time_ms: int
    threshold: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "documents_count": self.documents_count,
            "total_sentences": self.total_sentences,
            "processing_time_ms": self.processing_time_ms,
            "threshold": self.threshold,
        }


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Everything the service returns for one request."""

    metadata: AnalysisMetadata
    matches: List[SentenceMatch]
    global_similarity: List[DocumentPairScore]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "matches": [match.to_dict() for match in self.matches],
            "global_similarity": [pair.to_dict() for pair in self.global_similarity],
        }

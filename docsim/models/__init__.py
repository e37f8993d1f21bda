"""Domain dataclasses shared across services and the API layer."""

from docsim.models.analysis import (
    AnalysisMetadata,
    AnalysisResult,
    Document,
    DocumentPairScore,
    Sentence,
    SentenceMatch,
    TermVector,
)

__all__ = [
    "AnalysisMetadata",
    "AnalysisResult",
    "Document",
    "DocumentPairScore",
    "Sentence",
    "SentenceMatch",
    "TermVector",
]

"""Sentence-level document similarity analysis (TF-IDF + cosine)."""

__version__ = "1.0.0"

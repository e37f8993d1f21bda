"""Helpers that sit outside the scoring core (text extraction)."""

"""HTTP surface of the analysis service."""

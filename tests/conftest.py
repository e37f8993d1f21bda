import pytest

from docsim.core.config import Settings
from docsim.services.similarity_pipeline import SimilarityPipeline


@pytest.fixture
def settings():
    return Settings(max_workers=4)


@pytest.fixture
def pipeline(settings):
    return SimilarityPipeline(settings)


@pytest.fixture
def serial_pipeline(settings):
    return SimilarityPipeline(settings, max_workers=1)


@pytest.fixture
def scenario_documents():
    return [
        ("doc_a.txt", "AI is powerful. ML enables analytics."),
        ("doc_b.txt", "ML is amazing. ML enables analytics."),
    ]

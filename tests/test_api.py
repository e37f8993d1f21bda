import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from docsim.api.deps import get_app_settings, get_similarity_pipeline
from docsim.core.config import Settings
from docsim.core.errors import BaseApplicationError, InternalServerError
from docsim.core.middleware import application_error_handler, unhandled_error_handler
from docsim.main import app

DOC_A = b"AI is powerful. ML enables analytics."
DOC_B = b"ML is amazing. ML enables analytics."


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def txt(name, content):
    return ("files", (name, content, "text/plain"))


def error_code(response):
    return response.json()["error"]["code"]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.headers["X-Request-ID"]

    def test_root_lists_endpoints(self, client):
        response = client.get("/")
        assert response.json()["endpoints"]["analyze"] == "/api/analyze"


class TestAnalyze:
    def test_scenario(self, client):
        response = client.post(
            "/api/analyze",
            files=[txt("doc_a.txt", DOC_A), txt("doc_b.txt", DOC_B)],
            data={"threshold": "0.7"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["metadata"]["documents_count"] == 2
        assert body["metadata"]["total_sentences"] == 4
        assert body["metadata"]["threshold"] == 0.7

        [match] = body["matches"]
        assert match["source_doc"] == "doc_a.txt"
        assert match["target_doc"] == "doc_b.txt"
        assert match["source_sentence_index"] == 1
        assert match["target_sentence"] == "ML enables analytics."
        assert match["similarity"] == pytest.approx(1.0)

        assert body["global_similarity"] == [
            {"docA": "doc_a.txt", "docB": "doc_b.txt", "score": pytest.approx(1.0)}
        ]

    def test_default_threshold(self, client):
        response = client.post("/api/analyze", files=[txt("a.txt", DOC_A), txt("b.txt", DOC_B)])
        assert response.status_code == 200
        assert response.json()["metadata"]["threshold"] == 0.7

    def test_blank_threshold_uses_default(self, client):
        response = client.post(
            "/api/analyze",
            files=[txt("a.txt", DOC_A), txt("b.txt", DOC_B)],
            data={"threshold": " "},
        )
        assert response.status_code == 200
        assert response.json()["metadata"]["threshold"] == 0.7

    def test_no_matches(self, client):
        response = client.post(
            "/api/analyze",
            files=[txt("x.txt", b"Alpha beta gamma."), txt("y.txt", b"Delta epsilon zeta.")],
            data={"threshold": "0.1"},
        )
        body = response.json()
        assert body["matches"] == []
        assert body["global_similarity"] == []


class TestAnalyzeErrors:
    @pytest.mark.parametrize("threshold", ["abc", "1.5", "-0.1", "nan"])
    def test_invalid_threshold(self, client, threshold):
        response = client.post(
            "/api/analyze",
            files=[txt("a.txt", DOC_A), txt("b.txt", DOC_B)],
            data={"threshold": threshold},
        )
        assert response.status_code == 400
        assert error_code(response) == "INVALID_THRESHOLD"

    def test_single_document(self, client):
        response = client.post("/api/analyze", files=[txt("a.txt", DOC_A)])
        assert response.status_code == 400
        assert error_code(response) == "NOT_ENOUGH_DOCUMENTS"

    def test_too_many_documents(self, client):
        files = [txt(f"d{i}.txt", DOC_A) for i in range(6)]
        response = client.post("/api/analyze", files=files)
        assert response.status_code == 400
        assert error_code(response) == "TOO_MANY_DOCUMENTS"

    def test_empty_document(self, client):
        response = client.post("/api/analyze", files=[txt("a.txt", DOC_A), txt("blank.txt", b"  \n ")])
        assert response.status_code == 400
        body = response.json()["error"]
        assert body["code"] == "EMPTY_DOCUMENT"
        assert body["request_id"] == response.headers["X-Request-ID"]

    def test_unsupported_type(self, client):
        response = client.post(
            "/api/analyze",
            files=[txt("a.txt", DOC_A), ("files", ("b.csv", b"a,b", "text/csv"))],
        )
        assert response.status_code == 400
        assert error_code(response) == "UNSUPPORTED_FILE_TYPE"

    def test_unreadable_docx(self, client):
        response = client.post(
            "/api/analyze",
            files=[txt("a.txt", DOC_A), ("files", ("b.docx", b"not a zip", "application/octet-stream"))],
        )
        assert response.status_code == 422
        assert error_code(response) == "EXTRACTION_FAILED"

    def test_file_too_large(self, client):
        app.dependency_overrides[get_app_settings] = lambda: Settings(max_file_size=16)
        response = client.post("/api/analyze", files=[txt("a.txt", DOC_A), txt("b.txt", DOC_B)])
        assert response.status_code == 413
        assert error_code(response) == "FILE_TOO_LARGE"

    def test_total_size_too_large(self, client):
        app.dependency_overrides[get_app_settings] = lambda: Settings(max_total_size=50)
        response = client.post("/api/analyze", files=[txt("a.txt", DOC_A), txt("b.txt", DOC_B)])
        assert response.status_code == 413
        assert error_code(response) == "TOTAL_SIZE_TOO_LARGE"


class TestDependencies:
    def test_pipeline_follows_injected_settings(self):
        settings = Settings(default_threshold=0.25, max_workers=1)
        pipeline = get_similarity_pipeline(settings)
        assert pipeline.settings is settings
        assert pipeline.max_workers == 1

    def test_settings_override_reaches_pipeline(self, client):
        app.dependency_overrides[get_app_settings] = lambda: Settings(default_threshold=0.25, max_workers=1)
        response = client.post("/api/analyze", files=[txt("a.txt", DOC_A), txt("b.txt", DOC_B)])
        assert response.status_code == 200
        body = response.json()
        assert body["metadata"]["threshold"] == 0.25
        assert len(body["matches"]) == 2


class TestUnexpectedErrors:
    @pytest.fixture
    def failing_client(self):
        failing_app = FastAPI()
        failing_app.add_exception_handler(BaseApplicationError, application_error_handler)
        failing_app.add_exception_handler(Exception, unhandled_error_handler)

        @failing_app.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        with TestClient(failing_app, raise_server_exceptions=False) as test_client:
            yield test_client

    def test_rendered_as_internal_error(self, failing_client):
        response = failing_client.get("/boom")
        assert response.status_code == 500
        body = response.json()["error"]
        assert body["code"] == "INTERNAL_ERROR"
        assert body["details"] == {"type": "RuntimeError"}

    def test_internal_error_envelope(self):
        error = InternalServerError(details={"type": "ValueError"})
        assert error.status_code == 500
        assert error.to_dict() == {
            "code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "details": {"type": "ValueError"},
        }

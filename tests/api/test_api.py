import pytest
from fastapi.testclient import TestClient

from fakes import PAGE_URL, FakeEmbedder, FakeLLM, FakeVectorStore
from pagechat.core.exceptions import StorageServiceError
from pagechat.core.retriever import Retriever
from pagechat.dependencies import get_ingester, get_retriever, get_vector_store
from pagechat.main import create_app


@pytest.fixture
def app(ingester, fake_store, fake_embedder):
    app = create_app()
    app.dependency_overrides[get_ingester] = lambda: ingester
    app.dependency_overrides[get_vector_store] = lambda: fake_store
    app.dependency_overrides[get_retriever] = lambda: Retriever(
        fake_embedder, fake_store, llm=FakeLLM(answer="They build retrieval systems.")
    )
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestIngestEndpoints:
    def test_ingest_page(self, client, fake_store):
        response = client.post("/api/ingest", json={"url": PAGE_URL})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ingested"
        assert data["entries_created"] == len(fake_store.entries)
        assert data["internal_links"] == ["https://example.com/projects", "https://example.com/about"]

    def test_repeat_ingest_is_skipped(self, client):
        client.post("/api/ingest", json={"url": PAGE_URL})
        response = client.post("/api/ingest", json={"url": PAGE_URL})

        assert response.json()["status"] == "skipped"
        assert response.json()["entries_created"] == 0

    def test_failed_page_is_reported(self, client):
        response = client.post("/api/ingest", json={"url": "https://example.com/missing"})

        assert response.status_code == 200
        assert response.json()["status"] == "failed"
        assert "404" in response.json()["error"]

    def test_batch(self, client):
        response = client.post(
            "/api/ingest/batch",
            json={"urls": [PAGE_URL, "ftp://example.com", PAGE_URL]},
        )

        assert [r["status"] for r in response.json()] == ["ingested", "failed", "skipped"]

    def test_batch_requires_urls(self, client):
        assert client.post("/api/ingest/batch", json={"urls": []}).status_code == 422


class TestChatEndpoint:
    def test_chat_answers_from_ingested_pages(self, client):
        client.post("/api/ingest", json={"url": PAGE_URL})

        response = client.post("/api/chat", json={"query": "What do they build?"})

        assert response.status_code == 200
        assert response.json() == {
            "answer": "They build retrieval systems.",
            "urls": [PAGE_URL],
        }

    def test_chat_with_empty_store(self, client):
        response = client.post("/api/chat", json={"query": "Anything?", "top_k": 5})

        assert response.status_code == 200
        assert response.json()["urls"] == []

    def test_collaborator_failure_is_502(self, app, client):
        class BrokenStore(FakeVectorStore):
            def nearest_neighbors(self, query_vector, k):
                raise StorageServiceError("Milvus offline")

        app.dependency_overrides[get_retriever] = lambda: Retriever(
            FakeEmbedder(), BrokenStore(), llm=FakeLLM()
        )
        response = client.post("/api/chat", json={"query": "q"})

        assert response.status_code == 502
        assert "Milvus offline" in response.json()["detail"]

    def test_chat_without_model_raises_clear_error(self, app):
        app.dependency_overrides[get_retriever] = lambda: Retriever(FakeEmbedder(), FakeVectorStore())
        client = TestClient(app)

        with pytest.raises(RuntimeError, match="chat model"):
            client.post("/api/chat", json={"query": "q"})

    def test_validation(self, client):
        assert client.post("/api/chat", json={"query": ""}).status_code == 422
        assert client.post("/api/chat", json={"query": "q", "top_k": 0}).status_code == 422


class TestEntriesEndpoint:
    def test_lists_stored_entries(self, client, fake_store):
        client.post("/api/ingest", json={"url": PAGE_URL})

        response = client.get("/api/entries", params={"limit": 1000})

        data = response.json()
        assert data["total"] == len(fake_store.entries)
        assert {e["metadata"]["url"] for e in data["entries"]} == {PAGE_URL}

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}

"""
Shared test fixtures.

Provides: fake collaborators wired into a scraper and an ingester.
"""

import pytest

from fakes import PAGE_URL, SAMPLE_HTML, FakeEmbedder, FakeFetcher, FakeLLM, FakeVectorStore
from pagechat.ingestion.pipeline import WebPageIngester
from pagechat.ingestion.visited import VisitedSet
from pagechat.ingestion.website import WebPageScraper


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher({PAGE_URL: SAMPLE_HTML})


@pytest.fixture
def scraper(fake_fetcher: FakeFetcher) -> WebPageScraper:
    return WebPageScraper(fetcher=fake_fetcher)


@pytest.fixture
def ingester(scraper, fake_embedder, fake_store) -> WebPageIngester:
    return WebPageIngester(
        scraper=scraper,
        embedder=fake_embedder,
        vector_store=fake_store,
        visited=VisitedSet(),
        chunk_size=1000,
    )

import json

import pytest

from pagechat.core.exceptions import FetchError, InvalidUrlError
from pagechat.ingestion.base import MetaEntry
from pagechat.ingestion.urls import exclude_path_prefixes
from pagechat.ingestion.website import WebPageScraper

from fakes import PAGE_URL, SAMPLE_HTML, FakeFetcher


@pytest.fixture
def record(scraper):
    return scraper.extract(SAMPLE_HTML, PAGE_URL)


class TestExtractHead:
    def test_title(self, record):
        assert record.head.title == "Abdul Sami | Portfolio"

    def test_meta_entries_keep_absent_attributes(self, record):
        assert record.head.meta == [
            MetaEntry(name=None, content=None),
            MetaEntry(name="description", content="Projects and writing"),
            MetaEntry(name="keywords", content="python, rag"),
            MetaEntry(name=None, content="Portfolio"),
        ]

    def test_description_and_keywords(self, record):
        assert record.head.description == "Projects and writing"
        assert record.head.keywords == "python, rag"

    def test_missing_head_fields_default_to_empty(self, scraper):
        record = scraper.extract("<html><body><p>Hi</p></body></html>", PAGE_URL)

        assert record.head.title == ""
        assert record.head.meta == []
        assert record.head.description == ""
        assert record.head.keywords == ""

    def test_serialize_is_stable_and_omits_absent_attributes(self, record):
        serialized = record.head.serialize()

        assert serialized == record.head.serialize()
        assert list(json.loads(serialized)) == ["title", "meta", "description", "keywords"]
        assert json.loads(serialized)["meta"][0] == {}
        assert json.loads(serialized)["meta"][3] == {"content": "Portfolio"}
        assert '"title":"Abdul Sami | Portfolio"' in serialized


class TestExtractBody:
    def test_body_text_is_clean_and_collapsed(self, record):
        assert record.body_text.startswith("Projects I build retrieval systems.")
        assert "  " not in record.body_text
        assert "\n" not in record.body_text

    def test_script_style_noscript_are_removed(self, record):
        assert "tracking" not in record.body_text
        assert "Enable JavaScript" not in record.body_text
        assert "color: red" not in record.body_text

    def test_document_without_body_tag(self, scraper):
        record = scraper.extract("<p>Loose   text</p><script>x()</script>", PAGE_URL)
        assert record.body_text == "Loose text"

    def test_head_text_stays_out_of_bodiless_document(self, scraper):
        html = "<html><head><title>Only Title</title></head><p>Loose text</p></html>"
        record = scraper.extract(html, PAGE_URL)

        assert record.head.title == "Only Title"
        assert record.body_text == "Loose text"

    def test_bare_title_without_head_tag(self, scraper):
        record = scraper.extract("<title>T</title><p>Text</p>", PAGE_URL)

        assert record.head.title == "T"
        assert record.body_text == "Text"


class TestExtractLinks:
    def test_links_are_classified(self, record):
        assert record.internal_links == [
            "https://example.com/projects",
            "https://example.com/about",
        ]
        assert record.external_links == ["https://github.com/someone"]

    def test_malformed_href_does_not_abort_extraction(self, scraper, caplog):
        with caplog.at_level("WARNING"):
            record = scraper.extract(SAMPLE_HTML, PAGE_URL)

        assert "https://github.com/someone" in record.external_links
        assert "Invalid URL found: http://[::1" in caplog.text

    def test_exclude_predicate(self, fake_fetcher):
        scraper = WebPageScraper(fetcher=fake_fetcher, exclude=exclude_path_prefixes("/about"))
        record = scraper.extract(SAMPLE_HTML, PAGE_URL)
        assert record.internal_links == ["https://example.com/projects"]

    def test_sets_are_disjoint(self, record):
        assert not set(record.internal_links) & set(record.external_links)


class TestScrape:
    def test_scrape_fetches_then_extracts(self, scraper, fake_fetcher):
        record = scraper.scrape(PAGE_URL)

        assert fake_fetcher.calls == [PAGE_URL]
        assert record.source_url == PAGE_URL
        assert record.head.title == "Abdul Sami | Portfolio"

    def test_source_url_is_canonical(self, fake_fetcher):
        fake_fetcher.pages["https://example.com/docs"] = SAMPLE_HTML
        scraper = WebPageScraper(fetcher=fake_fetcher)

        record = scraper.scrape("https://example.com/docs/#intro")

        assert record.source_url == "https://example.com/docs"
        assert fake_fetcher.calls == ["https://example.com/docs"]

    @pytest.mark.parametrize("url", ["ftp://example.com/file", "example.com", "file:///etc/passwd"])
    def test_non_http_url_fails_before_fetch(self, scraper, fake_fetcher, url):
        with pytest.raises(InvalidUrlError):
            scraper.scrape(url)
        assert fake_fetcher.calls == []

    def test_invalid_url_error_is_a_fetch_error(self, scraper):
        with pytest.raises(FetchError):
            scraper.extract("<html></html>", "mailto:someone@example.com")

    def test_fetch_failure_propagates(self):
        scraper = WebPageScraper(fetcher=FakeFetcher({}))
        with pytest.raises(FetchError):
            scraper.scrape("https://example.com/missing")

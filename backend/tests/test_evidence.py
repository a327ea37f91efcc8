import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from config.constants import DOMAIN_REPUTATION
from exceptions import JudgeUnavailable
from models import SourceCandidate
from providers import EvidenceProvider, GoogleSearchProvider, WebSearchJudgeProvider, scrape_url_candidates
from services.evidence import EvidenceRetriever, domain_of, parse_published_date
from conftest import FakeGateway, make_judge, mock_async_client, mock_response


class StubProvider(EvidenceProvider):
    def __init__(self, name, candidates=None, configured=True, error=None):
        self.name = name
        self.candidates = candidates or []
        self._configured = configured
        self.error = error
        self.calls = 0

    @property
    def configured(self):
        return self._configured

    async def search(self, query, limit):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.candidates)


def candidate(url, title="Title", date_value=None):
    return SourceCandidate(title=title, url=url, date=date_value)


class TestDomainReputation:
    @pytest.mark.parametrize("host,expected", [
        ("reuters.com", 0.95),
        ("www.reuters.com", 0.95),
        ("edition.cnn.com", 0.75),
        ("en.wikipedia.org", 0.70),
        ("finance.yahoo.com", 0.72),
        ("data.census.gov", 0.92),
        ("www.ons.gov.uk", 0.92),
        ("cs.stanford.edu", 0.85),
        ("someblog.org", 0.65),
        ("unknown-news.net", 0.50),
        ("", 0.50),
    ])
    def test_scores(self, host, expected):
        assert DOMAIN_REPUTATION.get_score_for_domain(host) == expected


class TestAnnotation:
    def test_domain_of(self):
        assert domain_of("https://www.BBC.co.uk/news/1") == "bbc.co.uk"
        assert domain_of("not a url", "Example.com") == "example.com"

    @pytest.mark.parametrize("value,expected", [
        ("2025-03-01", date(2025, 3, 1)),
        ("2025-03-01T14:22:00Z", date(2025, 3, 1)),
        ("March 1, 2025", date(2025, 3, 1)),
    ])
    def test_parse_dates(self, value, expected, today):
        assert parse_published_date(value, today) == (expected, False)

    @pytest.mark.parametrize("value", [None, "", "no date here"])
    def test_unusable_dates_default_to_today(self, value, today):
        assert parse_published_date(value, today) == (today, True)


@pytest.mark.asyncio
class TestEvidenceRetriever:
    """Tests for EvidenceRetriever.retrieve."""

    async def test_first_provider_sufficient(self, today):
        first = StubProvider("first", [candidate("https://www.reuters.com/a"), candidate("https://apnews.com/b")])
        second = StubProvider("second", [candidate("https://bbc.com/c")])

        sources = await EvidenceRetriever([first, second]).retrieve("query", today=today)

        assert [s.domain for s in sources] == ["reuters.com", "apnews.com"]
        assert second.calls == 0

    async def test_fallback_merges_and_dedupes(self, today):
        first = StubProvider("first", [candidate("https://www.reuters.com/a", title="From judge")])
        second = StubProvider("second", [
            candidate("https://www.reuters.com/a", title="From keyword search"),
            candidate("https://bbc.com/c", date_value="2025-02-01"),
        ])

        sources = await EvidenceRetriever([first, second]).retrieve("query", today=today)

        assert [s.url for s in sources] == ["https://www.reuters.com/a", "https://bbc.com/c"]
        assert sources[0].title == "From judge"
        assert sources[0].date_estimated and sources[0].published_date == today
        assert sources[1].published_date == date(2025, 2, 1) and not sources[1].date_estimated
        assert sources[1].credibility_score == 0.92

    async def test_capped_at_limit(self, today):
        first = StubProvider("first", [candidate(f"https://site{i}.example/x") for i in range(12)])
        sources = await EvidenceRetriever([first]).retrieve("query", limit=8, today=today)
        assert len(sources) == 8

    async def test_unconfigured_and_failing_providers(self, today):
        skipped = StubProvider("skipped", [candidate("https://a.example/1")], configured=False)
        broken = StubProvider("broken", error=RuntimeError("boom"))
        working = StubProvider("working", [candidate("https://b.example/2")])

        sources = await EvidenceRetriever([skipped, broken, working]).retrieve("query", today=today)

        assert skipped.calls == 0
        assert broken.calls == 1
        assert [s.url for s in sources] == ["https://b.example/2"]

    async def test_nothing_found_is_empty_list(self, today):
        sources = await EvidenceRetriever([StubProvider("empty")]).retrieve("query", today=today)
        assert sources == []


class TestUrlScraping:
    def test_one_source_per_domain(self):
        text = (
            "See https://www.reuters.com/a and https://reuters.com/b for details, "
            "also (https://apnews.com/c). Nothing else."
        )
        candidates = scrape_url_candidates(text)
        assert [c.url for c in candidates] == ["https://www.reuters.com/a", "https://apnews.com/c"]
        assert candidates[0].title == "Source from reuters.com"

    def test_no_urls(self):
        assert scrape_url_candidates("No links in this answer.") == []


@pytest.mark.asyncio
class TestWebSearchJudgeProvider:
    async def test_parses_json_sources(self):
        reply = "```json\n" + json.dumps([
            {"title": "Rates rise", "url": "https://www.reuters.com/rates", "date": "2025-03-01"},
            {"title": "Bad", "url": "not-a-url"},
        ]) + "\n```"
        gateway = FakeGateway({"sonar-pro": reply})
        provider = WebSearchJudgeProvider(gateway, [make_judge("sonar-pro"), make_judge("gpt-4o-mini")])

        candidates = await provider.search("central bank rates", 8)

        assert [c.url for c in candidates] == ["https://www.reuters.com/rates"]
        assert gateway.called("gpt-4o-mini") == []
        assert "central bank rates" in gateway.called("sonar-pro")[0]

    async def test_secondary_model_used_when_primary_fails(self):
        gateway = FakeGateway({
            "sonar-pro": JudgeUnavailable("sonar-pro", "HTTP 502"),
            "gpt-4o-mini": json.dumps([{"title": "AP story", "url": "https://apnews.com/x"}]),
        })
        provider = WebSearchJudgeProvider(gateway, [make_judge("sonar-pro"), make_judge("gpt-4o-mini")])

        candidates = await provider.search("query", 5)

        assert [c.url for c in candidates] == ["https://apnews.com/x"]

    async def test_prose_reply_falls_back_to_url_scraping(self):
        gateway = FakeGateway({"sonar-pro": "Try https://www.bbc.com/news/1 or https://www.bbc.com/news/2."})
        provider = WebSearchJudgeProvider(gateway, [make_judge("sonar-pro")])

        candidates = await provider.search("query", 5)

        assert [c.title for c in candidates] == ["Source from bbc.com"]

    async def test_unusable_json_items_fall_back_to_url_scraping(self):
        reply = json.dumps([
            {"href": "https://www.npr.org/rates", "text": "NPR"},
            {"title": "", "url": "https://www.pbs.org/rates"},
        ])
        gateway = FakeGateway({"sonar-pro": reply})
        provider = WebSearchJudgeProvider(gateway, [make_judge("sonar-pro")])

        candidates = await provider.search("query", 5)

        assert [c.url for c in candidates] == ["https://www.npr.org/rates", "https://www.pbs.org/rates"]
        assert [c.title for c in candidates] == ["Source from npr.org", "Source from pbs.org"]

    async def test_all_judges_fail(self):
        provider = WebSearchJudgeProvider(FakeGateway(), [make_judge("sonar-pro"), make_judge("gpt-4o-mini")])
        assert await provider.search("query", 5) == []

    async def test_not_configured_without_gateway_key(self):
        provider = WebSearchJudgeProvider(FakeGateway(configured=False), [make_judge("sonar-pro")])
        assert not provider.configured


@pytest.mark.asyncio
class TestGoogleSearchProvider:
    """Tests for the keyword search provider."""

    async def test_maps_items(self):
        payload = {"items": [
            {
                "title": "Fed raises rates",
                "link": "https://www.reuters.com/markets/fed",
                "snippet": "The Federal Reserve raised...",
                "pagemap": {"metatags": [{"article:published_time": "2025-03-01T10:00:00Z"}]},
            },
            {"title": "No date", "link": "https://example.com/page"},
            {"title": "", "link": "https://example.com/untitled"},
        ]}
        client = mock_async_client(get=AsyncMock(return_value=mock_response(payload)))
        provider = GoogleSearchProvider("key", "cx")

        with patch("providers.google_search.httpx.AsyncClient", return_value=client):
            candidates = await provider.search("fed rates", 8)

        assert [c.url for c in candidates] == ["https://www.reuters.com/markets/fed", "https://example.com/page"]
        assert candidates[0].date == "2025-03-01T10:00:00Z"
        assert candidates[1].date is None
        params = client.get.call_args.kwargs["params"]
        assert params["q"] == "fed rates" and params["num"] == 8 and params["cx"] == "cx"

    async def test_unconfigured_returns_nothing(self):
        with patch("providers.google_search.httpx.AsyncClient") as client_class:
            assert await GoogleSearchProvider(None, "cx").search("query", 5) == []
            client_class.assert_not_called()

    async def test_http_error_returns_nothing(self):
        response = mock_response({}, status_code=403)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "forbidden", request=MagicMock(), response=MagicMock(status_code=403, text="quota")
        )
        client = mock_async_client(get=AsyncMock(return_value=response))

        with patch("providers.google_search.httpx.AsyncClient", return_value=client):
            assert await GoogleSearchProvider("key", "cx").search("query", 5) == []
        assert client.get.await_count == 1

    async def test_transport_errors_are_retried(self):
        client = mock_async_client(get=AsyncMock(side_effect=httpx.ConnectError("refused")))

        with patch("providers.google_search.httpx.AsyncClient", return_value=client), \
                patch("utils.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await GoogleSearchProvider("key", "cx").search("query", 5) == []

        assert client.get.await_count == 3
        assert sleep.await_count == 2

import asyncio
import json
import sys
from datetime import date, timedelta
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from exceptions import JudgeUnavailable
from models import Source
from services.judge_gateway import JudgeIdentity


class FakeGateway:
    """Stands in for JudgeGateway with scripted replies keyed by judge display name.

    A reply may be a string, an exception instance to raise, or a callable
    taking the prompt and returning a string.
    """

    def __init__(self, replies=None, configured=True, delay=0.0):
        self.replies = dict(replies or {})
        self.configured = configured
        self.delay = delay
        self.calls = []

    async def ask(self, identity, prompt, timeout=None):
        self.calls.append((identity.display_name, prompt))
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.replies.get(identity.display_name)
        if reply is None:
            raise JudgeUnavailable(identity.display_name, "no scripted reply")
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply

    def called(self, name):
        return [prompt for judge, prompt in self.calls if judge == name]


def make_judge(name, assistant_name="Test-Assistant"):
    return JudgeIdentity(
        display_name=name,
        assistant_name=assistant_name,
        system_prompt="You are a test judge.",
        llm_provider="openai",
        model_name=name,
    )


def make_source(url, credibility=0.9, days_old=1, today=None, estimated=False, title=None):
    today = today or date.today()
    return Source(
        title=title or f"Article at {url}",
        url=url,
        domain=url.split("/")[2].replace("www.", ""),
        published_date=today - timedelta(days=days_old),
        credibility_score=credibility,
        snippet="Excerpt.",
        date_estimated=estimated,
    )


def mock_response(json_data=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.raise_for_status = MagicMock()
    response.text = str(json_data)
    return response


def mock_async_client(get=None, post=None):
    """An httpx.AsyncClient replacement usable as ``async with``."""
    client = MagicMock()
    client.get = get or AsyncMock()
    client.post = post or AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client



class FakeJudgeApi:
    """Routes judge API POSTs by path and counts assistant creations.

    ``message_response`` replaces the normal reply to the message POST.
    """

    def __init__(self, existing=None, reply="judge says hi", message_response=None):
        self.existing = existing or []
        self.reply = reply
        self.message_response = message_response
        self.created = 0
        self.messages = []

    async def get(self, url, **kwargs):
        await asyncio.sleep(0)
        if isinstance(self.existing, MagicMock):
            return self.existing
        return mock_response(self.existing)

    async def post(self, url, **kwargs):
        await asyncio.sleep(0)
        if url.endswith("/assistants"):
            self.created += 1
            return mock_response({"assistant_id": f"asst-{self.created}"})
        if url.endswith("/threads"):
            return mock_response({"thread_id": "thread-1"})
        if url.endswith("/messages"):
            self.messages.append(kwargs["data"])
            return self.message_response or mock_response({"content": self.reply})
        raise AssertionError(f"unexpected url {url}")

    def client(self):
        return mock_async_client(get=AsyncMock(side_effect=self.get), post=AsyncMock(side_effect=self.post))


def not_json_response():
    response = mock_response(None)
    response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>oops</html>", 0)
    response.text = "<html>oops</html>"
    return response

@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def today():
    return date(2025, 3, 10)


@pytest.fixture
def verifier_judges():
    return [make_judge("judge-a"), make_judge("judge-b"), make_judge("judge-c")]


@pytest.fixture
def bias_judges():
    return [
        make_judge("progressive", "Verity-Bias-Progressive"),
        make_judge("conservative", "Verity-Bias-Conservative"),
        make_judge("international", "Verity-Bias-International"),
    ]


@pytest.fixture
def clear_credentials(monkeypatch):
    """Remove every credential so Settings sees only what a test passes in."""
    for key in ("JUDGE_API_KEY", "GOOGLE_SEARCH_API_KEY", "GOOGLE_SEARCH_ENGINE_ID"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def analysis_service():
    service = MagicMock()
    service.analyze = AsyncMock()
    service.capabilities.return_value = {
        "judges": True,
        "web_search_judge": True,
        "keyword_search": False,
    }
    return service


@pytest.fixture
def test_client(analysis_service):
    """Create a TestClient for the FastAPI app with the analysis service mocked."""
    from fastapi.testclient import TestClient
    import main

    main.app.dependency_overrides[main.get_analysis_service] = lambda: analysis_service
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from config import logger
from config.constants import API_TIMEOUTS, RETRIEVAL_CONFIG
from models import SourceCandidate
from utils.retry import async_retry
from .base import EvidenceProvider

_DATE_METATAGS = ("article:published_time", "og:updated_time", "date", "pubdate")


class GoogleSearchProvider(EvidenceProvider):
    """Keyword search through the Google Custom Search JSON API."""
    name = "google_search"

    def __init__(
        self,
        api_key: Optional[str],
        engine_id: Optional[str],
        endpoint: str = "https://www.googleapis.com/customsearch/v1",
        timeout: float = API_TIMEOUTS.GOOGLE_SEARCH,
    ):
        self.api_key = api_key
        self.engine_id = engine_id
        self.endpoint = endpoint
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.engine_id)

    async def search(self, query: str, limit: int) -> List[SourceCandidate]:
        if not self.configured or not query.strip():
            return []

        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "num": min(limit, RETRIEVAL_CONFIG.GOOGLE_MAX_RESULTS),
        }
        try:
            data = await self._fetch(params)
        except httpx.HTTPStatusError as e:
            logger.error("Google Search HTTP error %s: %s", e.response.status_code, e.response.text[:300])
            return []
        except httpx.RequestError as e:
            logger.error("Google Search request error: %s", str(e))
            return []

        items = data.get("items") or []
        logger.info(f"Google Search returned {len(items)} result(s)")
        return [c for c in (self._to_candidate(item) for item in items) if c is not None]

    @async_retry(exceptions=(httpx.RequestError,))
    async def _fetch(self, params: Dict[str, Any]) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(self.endpoint, params=params)
            r.raise_for_status()
            return r.json()

    @staticmethod
    def _to_candidate(item: Dict[str, Any]) -> Optional[SourceCandidate]:
        metatags = (item.get("pagemap") or {}).get("metatags") or [{}]
        published = next((metatags[0].get(tag) for tag in _DATE_METATAGS if metatags[0].get(tag)), None)
        try:
            return SourceCandidate(
                title=item.get("title") or "",
                url=item.get("link") or "",
                snippet=item.get("snippet"),
                date=published,
            )
        except ValidationError as e:
            logger.debug(f"Skipping Google result {item.get('link')!r}: {e.error_count()} error(s)")
            return None

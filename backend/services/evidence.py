from datetime import date
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from dateutil import parser as dateparser

from config import RETRIEVAL_CONFIG, logger
from config.constants import DOMAIN_REPUTATION, DomainReputation
from models import Source, SourceCandidate
from providers import EvidenceProvider


def domain_of(url: str, fallback: Optional[str] = None) -> str:
    hostname = (urlparse(url).hostname or "").lower()
    if not hostname:
        return (fallback or "unknown").lower()
    return hostname[4:] if hostname.startswith("www.") else hostname


def parse_published_date(value: Optional[str], today: date) -> Tuple[date, bool]:
    """Returns (date, estimated); estimated is True when ``value`` was unusable."""
    if not value:
        return today, True
    try:
        return dateparser.parse(value).date(), False
    except (ValueError, OverflowError, TypeError):
        return today, True


class EvidenceRetriever:
    """Finds web sources for a claim by trying providers in order.

    The next provider runs only while fewer than ``min_results`` sources have
    been found. Results are merged, deduplicated by URL (first seen wins) and
    capped at the requested limit.
    """

    def __init__(
        self,
        providers: Sequence[EvidenceProvider],
        reputation: DomainReputation = DOMAIN_REPUTATION,
        min_results: int = RETRIEVAL_CONFIG.MIN_RESULTS,
    ):
        self.providers = list(providers)
        self.reputation = reputation
        self.min_results = min_results

    async def retrieve(
        self,
        query: str,
        limit: int = RETRIEVAL_CONFIG.RESULTS_PER_CLAIM,
        today: Optional[date] = None,
    ) -> List[Source]:
        today = today or date.today()
        merged: List[Source] = []
        seen_urls = set()

        for provider in self.providers:
            if len(merged) >= self.min_results:
                break
            if not provider.configured:
                logger.debug(f"Skipping unconfigured provider {provider.name}")
                continue

            try:
                candidates = await provider.search(query, limit)
            except Exception:
                logger.exception(f"Provider {provider.name} failed", extra={"query": query[:80]})
                continue

            added = 0
            for candidate in candidates:
                if candidate.url in seen_urls:
                    continue
                seen_urls.add(candidate.url)
                merged.append(self.annotate(candidate, today))
                added += 1
            logger.info(f"{provider.name} contributed {added} new source(s)", extra={"query": query[:80]})

        if not merged:
            logger.warning("No sources found", extra={"query": query[:80]})
        return merged[:limit]

    def annotate(self, candidate: SourceCandidate, today: date) -> Source:
        domain = domain_of(candidate.url, candidate.domain)
        published, estimated = parse_published_date(candidate.date, today)
        return Source(
            title=candidate.title,
            url=candidate.url,
            domain=domain,
            published_date=published,
            credibility_score=self.reputation.get_score_for_domain(domain),
            snippet=candidate.snippet,
            date_estimated=estimated,
        )

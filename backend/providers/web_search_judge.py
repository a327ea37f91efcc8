import re
from typing import List, Sequence
from urllib.parse import urlparse

from config import JUDGE_CONFIG, logger
from exceptions import ConfigurationMissing, JudgeUnavailable, MalformedJudgeOutput
from models import SourceCandidate
from prompts import SEARCH_PROMPT
from services.judge_gateway import JudgeGateway, JudgeIdentity
from utils.parsing import parse_judge_list
from .base import EvidenceProvider

_URL_PATTERN = re.compile(r"https?://[^\s)\"'<>\]]+")


def scrape_url_candidates(text: str) -> List[SourceCandidate]:
    """Pull bare URLs out of prose, keeping the first per domain."""
    seen_domains = set()
    candidates = []
    for url in _URL_PATTERN.findall(text or ""):
        url = url.rstrip(".,;")
        hostname = (urlparse(url).hostname or "").lower()
        if hostname.startswith("www."):
            hostname = hostname[4:]
        if not hostname or hostname in seen_domains:
            continue
        seen_domains.add(hostname)
        candidates.append(SourceCandidate(title=f"Source from {hostname}", url=url, domain=hostname))
    return candidates


class WebSearchJudgeProvider(EvidenceProvider):
    """Asks a search-capable judge model for sources.

    Judges are tried in order; the next one is asked only when the previous
    call failed outright.
    """
    name = "web_search_judge"

    def __init__(
        self,
        gateway: JudgeGateway,
        judges: Sequence[JudgeIdentity],
        timeout: float = JUDGE_CONFIG.SEARCH_TIMEOUT,
    ):
        self.gateway = gateway
        self.judges = list(judges)
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return self.gateway.configured and bool(self.judges)

    async def search(self, query: str, limit: int) -> List[SourceCandidate]:
        prompt = SEARCH_PROMPT.format(limit=limit, query=query)
        for judge in self.judges:
            try:
                reply = await self.gateway.ask(judge, prompt, timeout=self.timeout)
            except (JudgeUnavailable, ConfigurationMissing) as e:
                logger.warning(f"Search judge {judge.display_name} failed: {e.message}")
                continue
            return self._parse(reply, judge)

        logger.error("All search judges failed", extra={"query": query[:80]})
        return []

    def _parse(self, reply: str, judge: JudgeIdentity) -> List[SourceCandidate]:
        try:
            candidates = parse_judge_list(reply, SourceCandidate)
            if candidates:
                logger.info(f"Parsed {len(candidates)} source(s) from {judge.display_name}")
                return candidates
            logger.warning(f"Search reply from {judge.display_name} held no usable source objects")
        except MalformedJudgeOutput as e:
            logger.warning(f"Search reply from {judge.display_name} is not JSON: {e.last_error}")

        candidates = scrape_url_candidates(reply)
        logger.info(f"Extracted {len(candidates)} source(s) from URLs in text")
        return candidates

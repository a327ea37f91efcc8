from .base import EvidenceProvider
from .web_search_judge import WebSearchJudgeProvider, scrape_url_candidates
from .google_search import GoogleSearchProvider

__all__ = [
    "EvidenceProvider",
    "WebSearchJudgeProvider",
    "scrape_url_candidates",
    "GoogleSearchProvider",
]

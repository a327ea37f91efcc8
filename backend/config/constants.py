from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class JudgeConfig:
    REQUEST_TIMEOUT: float = 30.0
    VERIFY_TIMEOUT: float = 45.0
    BIAS_TIMEOUT: float = 30.0
    SEARCH_TIMEOUT: float = 40.0
    SUMMARY_TIMEOUT: float = 20.0
    MAX_CONTEXT_LENGTH: int = 6000
    MAX_OCR_PROMPT_LENGTH: int = 2000
    DIAGNOSTIC_TEXT_LENGTH: int = 500


@dataclass(frozen=True)
class ClaimConfig:
    MAX_CLAIMS: int = 3
    MIN_CLAIM_LENGTH: int = 15
    MIN_JUDGE_CLAIM_LENGTH: int = 8
    FALLBACK_SLICE_LENGTH: int = 200
    MAX_INPUT_LENGTH: int = 10000


@dataclass(frozen=True)
class RetrievalConfig:
    RESULTS_PER_CLAIM: int = 8
    MIN_RESULTS: int = 2
    GOOGLE_MAX_RESULTS: int = 10


@dataclass(frozen=True)
class ConsensusConfig:
    # Used for scoring when every responding judge omitted its confidence.
    UNKNOWN_CONFIDENCE_SCORE: float = 0.25
    ALL_FAILED_CONFIDENCE: float = 0.0


@dataclass(frozen=True)
class BiasConfig:
    DEFAULT_BIAS: float = 0.0
    DEFAULT_SENSATIONALISM: float = 0.3
    LEFT_THRESHOLD: float = -0.5
    SLIGHT_LEFT_THRESHOLD: float = -0.15
    SLIGHT_RIGHT_THRESHOLD: float = 0.15
    RIGHT_THRESHOLD: float = 0.5


@dataclass(frozen=True)
class ScoringConfig:
    SOURCE_QUALITY_WEIGHT: float = 0.45
    MODEL_CONFIDENCE_WEIGHT: float = 0.30
    RECENCY_WEIGHT: float = 0.10
    AGREEMENT_WEIGHT: float = 0.10
    BIAS_WEIGHT: float = 0.05

    HIGH_CREDIBILITY_THRESHOLD: float = 0.7

    RECENCY_WEEK: float = 1.0
    RECENCY_MONTH: float = 0.9
    RECENCY_YEAR: float = 0.7
    RECENCY_OLDER: float = 0.4

    # None scores an undated source as if published today.
    UNDATED_RECENCY: Optional[float] = None

    LIKELY_TRUE_THRESHOLD: int = 75
    MIXED_THRESHOLD: int = 40


@dataclass(frozen=True)
class APITimeouts:
    """Timeout configurations for external API calls."""
    GOOGLE_SEARCH: float = 15.0
    ANALYSIS: float = 90.0


@dataclass(frozen=True)
class DomainReputation:
    SCORES: Dict[str, float] = field(default_factory=lambda: {
        # wire services
        "reuters.com": 0.95, "apnews.com": 0.95, "ap.org": 0.95,
        # international broadsheets
        "bbc.com": 0.92, "bbc.co.uk": 0.92,
        "nytimes.com": 0.90, "washingtonpost.com": 0.88,
        "theguardian.com": 0.88, "wsj.com": 0.88,
        "economist.com": 0.90, "ft.com": 0.90,
        # business
        "cnbc.com": 0.85, "bloomberg.com": 0.88, "forbes.com": 0.78,
        "businessinsider.com": 0.72, "marketwatch.com": 0.78,
        "finance.yahoo.com": 0.72, "barrons.com": 0.82,
        # science
        "nature.com": 0.95, "science.org": 0.95, "sciencedirect.com": 0.92,
        "pubmed.ncbi.nlm.nih.gov": 0.95, "arxiv.org": 0.85,
        "scholar.google.com": 0.85, "nih.gov": 0.92,
        # broadcast
        "cnn.com": 0.75, "nbcnews.com": 0.75, "abcnews.go.com": 0.75,
        "cbsnews.com": 0.75, "foxnews.com": 0.70, "msnbc.com": 0.72,
        # national outlets
        "usatoday.com": 0.75, "latimes.com": 0.80, "chicagotribune.com": 0.78,
        "nypost.com": 0.65, "politico.com": 0.78, "thehill.com": 0.76,
        "axios.com": 0.78, "theatlantic.com": 0.82, "vox.com": 0.72,
        "npr.org": 0.88, "pbs.org": 0.88,
        "aljazeera.com": 0.78, "dw.com": 0.80, "france24.com": 0.80,
        "scmp.com": 0.75, "japantimes.co.jp": 0.78,
        # fact-checkers
        "snopes.com": 0.88, "factcheck.org": 0.90, "politifact.com": 0.88,
        # tech
        "techcrunch.com": 0.75, "theverge.com": 0.72, "arstechnica.com": 0.78,
        "wired.com": 0.75,
        "wikipedia.org": 0.70,
    })
    GOV: float = 0.92
    EDU: float = 0.85
    ORG: float = 0.65
    DEFAULT: float = 0.50

    def get_score_for_domain(self, hostname: str) -> float:
        host = (hostname or "").lower().strip().rstrip(".")
        if host.startswith("www."):
            host = host[4:]
        labels = host.split(".")
        # exact host first, then parent domains (edition.cnn.com -> cnn.com)
        for i in range(len(labels) - 1):
            candidate = ".".join(labels[i:])
            if candidate in self.SCORES:
                return self.SCORES[candidate]
        if host.endswith(".gov") or host.endswith(".gov.uk"):
            return self.GOV
        if host.endswith(".edu"):
            return self.EDU
        if host.endswith(".org"):
            return self.ORG
        return self.DEFAULT


JUDGE_CONFIG = JudgeConfig()
CLAIM_CONFIG = ClaimConfig()
RETRIEVAL_CONFIG = RetrievalConfig()
CONSENSUS_CONFIG = ConsensusConfig()
BIAS_CONFIG = BiasConfig()
SCORING_CONFIG = ScoringConfig()
API_TIMEOUTS = APITimeouts()
DOMAIN_REPUTATION = DomainReputation()

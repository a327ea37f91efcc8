from typing import List

from config.constants import SCORING_CONFIG, ScoringConfig
from models import Source


class SourceQualityScorer:
    """Scores evidence by the static credibility of the domains it came from."""

    def __init__(self, config: ScoringConfig = None):
        self.config = config or SCORING_CONFIG

    def quality(self, sources: List[Source]) -> float:
        """
        Mean credibility of the evidence, 0.0 when there is none.

        Args:
            sources: Annotated evidence for one claim

        Returns:
            Source quality score from 0.0 to 1.0
        """
        if not sources:
            return 0.0
        return sum(s.credibility_score for s in sources) / len(sources)

    def independent_agreement(self, sources: List[Source]) -> float:
        """Fraction of evidence from high-credibility domains."""
        if not sources:
            return 0.0
        strong = [s for s in sources if s.credibility_score >= self.config.HIGH_CREDIBILITY_THRESHOLD]
        return len(strong) / len(sources)

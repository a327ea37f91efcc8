from datetime import date, datetime
from typing import List, Optional, Union

from config.constants import SCORING_CONFIG, ScoringConfig
from models import Source


class RecencyScorer:
    """Calculates how fresh the evidence is, stepped by article age."""

    def __init__(self, config: ScoringConfig = None):
        self.config = config or SCORING_CONFIG

    def score(self, sources: List[Source], now: Optional[Union[date, datetime]] = None) -> float:
        if not sources:
            return 0.0
        today = _as_date(now)
        return sum(self.score_source(s, today) for s in sources) / len(sources)

    def score_source(self, source: Source, today: date) -> float:
        if source.date_estimated and self.config.UNDATED_RECENCY is not None:
            return self.config.UNDATED_RECENCY
        return self.step(max(0, (today - source.published_date).days))

    def step(self, age_days: int) -> float:
        if age_days < 7:
            return self.config.RECENCY_WEEK
        if age_days < 30:
            return self.config.RECENCY_MONTH
        if age_days < 365:
            return self.config.RECENCY_YEAR
        return self.config.RECENCY_OLDER


def _as_date(value: Optional[Union[date, datetime]]) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value

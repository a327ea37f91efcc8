from datetime import date

from pydantic import Field, field_validator

from .base import ReportModel, clamp


class Source(ReportModel):
    """A retrieved document annotated with a static credibility score."""
    title: str
    url: str
    domain: str
    published_date: date
    credibility_score: float
    snippet: str = ""
    # True when the publish date was missing and defaulted to the retrieval day.
    date_estimated: bool = Field(default=False, exclude=True)

    @field_validator("credibility_score")
    @classmethod
    def _clamp_credibility(cls, v: float) -> float:
        return clamp(v, 0.0, 1.0)

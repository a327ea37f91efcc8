from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

from .base import ReportModel, clamp
from .claims import Claim

TrustLabel = Literal["Likely True", "Unverified / Mixed", "Likely Misleading", "Unable to Verify"]


class AnalysisReport(ReportModel):
    job_id: str
    claims: List[Claim]
    aggregate_trust_score: int
    label: TrustLabel
    summary: str
    generated_at: datetime

    @field_validator("aggregate_trust_score")
    @classmethod
    def _clamp_score(cls, v: int) -> int:
        return int(clamp(v, 0, 100))


class AnalyzeRequest(BaseModel):
    """Request body for /analyze."""
    text: str = Field(..., max_length=20000)

    model_config = {
        "json_schema_extra": {
            "example": {
                "text": "Company X announced 50% revenue growth in Q3 2024."
            }
        }
    }

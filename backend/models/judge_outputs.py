"""Schemas for the payloads judges are asked to emit.

These models validate what the structured-response extractor recovered from
free text. Extra keys are ignored, missing optional keys take defaults, and
a missing or unusable ``confidence`` becomes None rather than a made-up value.
"""
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from config import BIAS_CONFIG
from .base import clamp
from .claims import JudgeVerdictType

_VERDICT_SYNONYMS = {
    "likely_true": "likely_true",
    "true": "likely_true",
    "mostly_true": "likely_true",
    "supported": "likely_true",
    "accurate": "likely_true",
    "likely_misleading": "likely_misleading",
    "misleading": "likely_misleading",
    "likely_false": "likely_misleading",
    "false": "likely_misleading",
    "mostly_false": "likely_misleading",
    "contradicted": "likely_misleading",
    "inaccurate": "likely_misleading",
    "mixed": "mixed",
    "inconclusive": "mixed",
    "unverified": "mixed",
    "uncertain": "mixed",
    "partially_true": "mixed",
    "unable_to_verify": "mixed",
}


def normalize_verdict(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    key = re.sub(r"[\s\-/]+", "_", value.strip().lower())
    return _VERDICT_SYNONYMS.get(key)


def coerce_unit_interval(value: Any) -> Optional[float]:
    """Read a 0-1 value, accepting percentages like 85 or "85%"."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip().rstrip("%"))
    except ValueError:
        return None
    if number != number:
        return None
    if 1.0 < number <= 100.0:
        number = number / 100.0
    return clamp(number, 0.0, 1.0)


class JudgePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class JudgeOpinion(JudgePayload):
    verdict: JudgeVerdictType
    confidence: Optional[float] = None
    reasoning: str = ""

    @field_validator("verdict", mode="before")
    @classmethod
    def _normalize_verdict(cls, v: Any) -> str:
        normalized = normalize_verdict(v)
        if normalized is None:
            raise ValueError(f"unrecognised verdict {v!r}")
        return normalized

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, v: Any) -> Optional[float]:
        return coerce_unit_interval(v)

    @field_validator("reasoning", mode="before")
    @classmethod
    def _coerce_reasoning(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()


class BiasOpinion(JudgePayload):
    """A perspective judge's reading; only ``bias`` is mandatory."""
    bias: float
    sensationalism: float = BIAS_CONFIG.DEFAULT_SENSATIONALISM
    reasoning: str = ""

    @field_validator("bias", mode="before")
    @classmethod
    def _coerce_bias(cls, v: Any) -> float:
        if v is None or isinstance(v, bool):
            raise ValueError("bias is required")
        return clamp(float(v), -1.0, 1.0)

    @field_validator("sensationalism", mode="before")
    @classmethod
    def _coerce_sensationalism(cls, v: Any) -> float:
        value = coerce_unit_interval(v)
        return BIAS_CONFIG.DEFAULT_SENSATIONALISM if value is None else value

    @field_validator("reasoning", mode="before")
    @classmethod
    def _coerce_reasoning(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()


class SourceCandidate(JudgePayload):
    """A search hit before domain/credibility annotation."""
    title: str
    url: str
    snippet: str = ""
    date: Optional[str] = None
    domain: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_alternate_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("url") and data.get("link"):
            data["url"] = data["link"]
        if not data.get("snippet") and data.get("description"):
            data["snippet"] = data["description"]
        if not data.get("date"):
            data["date"] = data.get("publishedDate") or data.get("published_date")
        return data

    @field_validator("url")
    @classmethod
    def _require_http(cls, v: str) -> str:
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(f"not an http(s) url: {v!r}")
        return v

    @field_validator("title")
    @classmethod
    def _require_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title is empty")
        return v

    @field_validator("snippet", mode="before")
    @classmethod
    def _stringify_snippet(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("date", "domain", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Optional[str]:
        return None if v in (None, "") else str(v)

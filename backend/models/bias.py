from typing import Literal

from pydantic import field_validator

from .base import ReportModel, clamp

OverallBias = Literal["left", "slight_left", "center", "slight_right", "right"]


class BiasSignal(ReportModel):
    political_bias: float
    sensationalism: float
    overall_bias: OverallBias
    explanation: str

    @field_validator("political_bias")
    @classmethod
    def _clamp_bias(cls, v: float) -> float:
        return clamp(v, -1.0, 1.0)

    @field_validator("sensationalism")
    @classmethod
    def _clamp_sensationalism(cls, v: float) -> float:
        return clamp(v, 0.0, 1.0)

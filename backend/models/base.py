from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


class ReportModel(BaseModel):
    """Immutable model serialised with the camelCase names the clients read."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

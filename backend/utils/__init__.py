from .parsing import (
    extract_structured,
    parse_judge_payload,
    parse_judge_list,
    REPAIR_PIPELINE,
)
from .retry import async_retry
from .validation import InputValidator

__all__ = [
    "extract_structured",
    "parse_judge_payload",
    "parse_judge_list",
    "REPAIR_PIPELINE",
    "async_retry",
    "InputValidator",
]

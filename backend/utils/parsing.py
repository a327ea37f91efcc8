"""Recover structured data from free-text judge replies.

Judges are told to answer with bare JSON but routinely wrap it in prose,
fence it in markdown, or escape it one level too many. ``extract_structured``
runs a fixed pipeline of text transforms, trying a parse after each one that
changes the candidate, and stops at the first success.
"""
import json
import re
from typing import Any, Callable, Dict, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from config import JUDGE_CONFIG, logger
from exceptions import MalformedJudgeOutput

Shape = Literal["object", "array"]
Transform = Callable[[str, Shape], Optional[str]]
PayloadT = TypeVar("PayloadT", bound=BaseModel)

_DELIMITERS = {"object": ("{", "}"), "array": ("[", "]")}
_SHAPE_TYPES = {"object": dict, "array": list}

_FENCED_BLOCK = re.compile(r"```[\w-]*[ \t]*\n?(.*?)```", re.DOTALL)
_FENCE_MARKER = re.compile(r"```[\w-]*[ \t]*\n?")
_TRAILING_COMMA = re.compile(r",\s*([\]}])")


def strip_whitespace(text: str, shape: Shape) -> Optional[str]:
    return text.strip()


def strip_code_fences(text: str, shape: Shape) -> Optional[str]:
    if "```" not in text:
        return None
    block = _FENCED_BLOCK.search(text)
    if block:
        return block.group(1).strip()
    return _FENCE_MARKER.sub("", text).strip()


def slice_outer_delimiters(text: str, shape: Shape) -> Optional[str]:
    """Cut from the first opening delimiter to the last closing one."""
    open_ch, close_ch = _DELIMITERS[shape]
    start = text.find(open_ch)
    end = text.rfind(close_ch)
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def repair_characters(text: str, shape: Shape) -> Optional[str]:
    repaired = text.strip()
    if len(repaired) >= 2 and repaired[0] == repaired[-1] and repaired[0] in "\"'":
        repaired = repaired[1:-1]
    repaired = repaired.replace('\\\\"', '"').replace('\\"', '"')
    repaired = repaired.replace("\\'", "'")
    repaired = repaired.replace("\\n", "\n")
    repaired = _TRAILING_COMMA.sub(r"\1", repaired)
    if '"' not in repaired and "'" in repaired:
        repaired = repaired.replace("'", '"')
    return slice_outer_delimiters(repaired, shape) or repaired


REPAIR_PIPELINE: List[Transform] = [
    strip_whitespace,
    strip_code_fences,
    slice_outer_delimiters,
    repair_characters,
]


def _parse_shape(candidate: str, shape: Shape) -> Union[Dict[str, Any], List[Any]]:
    value = json.loads(candidate, strict=False)
    if not isinstance(value, _SHAPE_TYPES[shape]):
        raise ValueError(f"expected a JSON {shape}, got {type(value).__name__}")
    return value


def extract_structured(text: Optional[str], shape: Shape = "object") -> Union[Dict[str, Any], List[Any]]:
    """Parse ``text`` into a dict or list, repairing it as needed.

    Raises:
        MalformedJudgeOutput: every stage failed; carries the truncated
            original text and the last parser error.
    """
    if not text or not text.strip():
        raise MalformedJudgeOutput(text or "", "empty response")

    candidate = text
    attempted = set()
    last_error = "no parseable candidate"

    for transform in REPAIR_PIPELINE:
        transformed = transform(candidate, shape)
        if transformed is None:
            continue
        candidate = transformed
        if candidate in attempted:
            continue
        attempted.add(candidate)
        try:
            return _parse_shape(candidate, shape)
        except ValueError as e:
            last_error = str(e)

    raise MalformedJudgeOutput(text, last_error, max_length=JUDGE_CONFIG.DIAGNOSTIC_TEXT_LENGTH)


def _describe_validation_error(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
        for err in error.errors()
    )


def parse_judge_payload(text: Optional[str], model: Type[PayloadT]) -> PayloadT:
    """Extract a JSON object and validate it against ``model``."""
    data = extract_structured(text, "object")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedJudgeOutput(
            text or "",
            _describe_validation_error(e),
            max_length=JUDGE_CONFIG.DIAGNOSTIC_TEXT_LENGTH,
        ) from e


def parse_judge_list(text: Optional[str], model: Type[PayloadT]) -> List[PayloadT]:
    """Extract a JSON array and keep the items that validate against ``model``."""
    items = extract_structured(text, "array")
    parsed = []
    for idx, item in enumerate(items):
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as e:
            logger.debug(f"Dropping item {idx} of judge array: {_describe_validation_error(e)}")
    return parsed

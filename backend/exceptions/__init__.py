from typing import Optional, Dict, Any


class VerityException(Exception):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class MalformedJudgeOutput(VerityException):
    """Every repair stage failed to turn a judge reply into the expected shape."""

    def __init__(self, raw_text: str, last_error: str, max_length: int = 500):
        raw_text = raw_text or ""
        truncated = raw_text[:max_length] + ("..." if len(raw_text) > max_length else "")
        super().__init__(
            f"Judge output could not be parsed: {last_error}",
            {"raw_text": truncated, "last_error": last_error}
        )
        self.raw_text = truncated
        self.last_error = last_error


class JudgeUnavailable(VerityException):
    def __init__(self, judge_name: str, reason: str):
        super().__init__(
            f"Judge {judge_name} unavailable: {reason}",
            {"judge": judge_name, "reason": reason}
        )
        self.judge_name = judge_name


class ConfigurationMissing(VerityException):
    def __init__(self, capability: str, missing: str):
        super().__init__(
            f"{capability} is not configured: {missing} missing",
            {"capability": capability, "missing": missing}
        )


class ValidationException(VerityException):
    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Validation failed for {field}: {reason}",
            {"field": field, "reason": reason}
        )


class EmptyInputException(ValidationException):
    """No claim could be produced from the input text, so no report is possible."""

    def __init__(self, reason: str = "text contains no verifiable content"):
        super().__init__("text", reason)


class AnalysisTimeoutException(VerityException):
    def __init__(self, job_id: str, timeout: float):
        super().__init__(
            f"Analysis {job_id} exceeded {timeout:.0f}s",
            {"job_id": job_id, "timeout": timeout}
        )

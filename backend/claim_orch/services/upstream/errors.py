"""
Error taxonomy for calls against the claims platform.

Every failure in a workflow surfaces as one of these. The sequencer fills in
``step`` and ``completed_steps`` on the way out so a log line or an error
response can say which upstream call broke and what had already been done.
"""
from typing import Any, List, Optional


class OrchestrationError(Exception):
    """Base class for all workflow failures."""

    code = "orchestration_error"

    def __init__(self, message: str, step: Optional[str] = None):
        self.message = message
        self.step = step
        self.completed_steps: List[str] = []
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "step": self.step,
            "message": self.message,
            "completed_steps": list(self.completed_steps),
        }


class UpstreamHttpError(OrchestrationError):
    """Non-2xx response, or no response at all, from an upstream endpoint."""

    code = "upstream_http_error"

    def __init__(
        self,
        status_code: Optional[int],
        reason: str,
        method: str = "",
        url: str = "",
        step: Optional[str] = None,
    ):
        self.status_code = status_code
        self.reason = reason
        self.method = method
        self.url = url
        status = status_code if status_code is not None else "no response"
        super().__init__(f"{method} {url} failed: {status} {reason}".strip(), step=step)


class UpstreamLogicalError(OrchestrationError):
    """2xx response whose body reports a failure or cannot be decoded."""

    code = "upstream_logical_error"

    def __init__(self, message: str, response: Any = None, step: Optional[str] = None):
        self.response = response
        super().__init__(message, step=step)


class CodeLookupError(OrchestrationError):
    """No entry of a fetched list matches the requested description."""

    code = "code_lookup_error"

    def __init__(self, table: str, description: str, step: Optional[str] = None):
        self.table = table
        self.description = description
        super().__init__(f"No entry in {table} matches {description!r}", step=step)


class UnexpectedResultCountError(OrchestrationError):
    """Claim search returned a different number of claims than required."""

    code = "unexpected_result_count"

    def __init__(self, correlation_id: str, expected: int, actual: int, step: Optional[str] = None):
        self.correlation_id = correlation_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected {expected} claim(s) but found {actual} claim(s) for {correlation_id}",
            step=step,
        )


class NotificationError(OrchestrationError):
    """Settlement went through upstream but the payment notification did not."""

    code = "notification_failed"

    def __init__(self, case_id: Any, cause: OrchestrationError):
        self.case_id = case_id
        self.cause = cause
        super().__init__(
            f"Settlement for case {case_id} submitted, payment notification failed: {cause.message}"
        )

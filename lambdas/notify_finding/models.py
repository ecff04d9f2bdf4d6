# lambdas/notify_finding/models.py
"""
Plain-dataclass models and error types for the finding notifier.
"""
import json
from dataclasses import dataclass
from typing import Optional

UNKNOWN = "unknown"


# Error types
class NotifierError(Exception):
    """Base class for every failure the notifier reports."""


class MalformedFindingError(NotifierError, ValueError):
    """A required field of the finding is missing or has the wrong type."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class ChannelUnavailableError(NotifierError):
    """The publish attempt to the notification channel failed."""

    def __init__(self, channel: str, cause: str):
        self.channel = channel
        self.cause = cause
        super().__init__(f"publish to '{channel}' failed: {cause}")


class ConfigurationError(NotifierError):
    """The target channel is missing or cannot be used."""


# Data models
@dataclass(frozen=True)
class Finding:
    """
    The validated view of one GuardDuty finding.
    Only severity is guaranteed to be real data; every other field may hold UNKNOWN.
    """
    severity: float
    finding_type: str = UNKNOWN
    description: str = UNKNOWN
    resource_id: str = UNKNOWN
    account_id: str = UNKNOWN
    region: str = UNKNOWN
    timestamp: str = UNKNOWN
    finding_id: str = UNKNOWN


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of validating a raw event: either a Finding or the error explaining
    why one could not be built.
    """
    finding: Optional[Finding] = None
    error: Optional[MalformedFindingError] = None

    @property
    def ok(self) -> bool:
        return self.finding is not None

    def unwrap(self) -> Finding:
        if self.finding is None:
            raise self.error or MalformedFindingError("detail", "no finding extracted")
        return self.finding


@dataclass(frozen=True)
class NotificationMessage:
    subject: str
    body: str


@dataclass(frozen=True)
class DispatchResult:
    delivered: bool
    error_detail: Optional[str] = None
    message_id: Optional[str] = None


@dataclass(frozen=True)
class InvocationOutcome:
    """
    What the Lambda reports back to its caller. Only this type knows about the
    runtime's {"statusCode": ...} response shape.
    """
    status_code: int
    detail: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status_code == 200

    @classmethod
    def success(cls) -> "InvocationOutcome":
        return cls(status_code=200)

    @classmethod
    def failure(cls, status_code: int, error_kind: str, detail: str) -> "InvocationOutcome":
        return cls(status_code=status_code, detail=detail, error_kind=error_kind)

    def to_response(self) -> dict:
        if self.succeeded:
            return {"statusCode": 200}
        return {
            "statusCode": self.status_code,
            "body": json.dumps({"error": self.error_kind, "detail": self.detail}),
        }

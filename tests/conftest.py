# tests/conftest.py
import copy

import pytest

from lambdas.notify_finding.models import ChannelUnavailableError

TOPIC_ARN = "arn:aws:sns:us-east-1:123456789012:guardduty-alerts"

# The EventBridge event used as the end-to-end example.
SAMPLE_EVENT = {
    "detail": {
        "severity": 8,
        "type": "Backdoor:EC2/C&CActivity.B!DNS",
        "description": "EC2 instance communicating with a known command-and-control server.",
        "resource": {"resourceType": "Instance"},
    },
    "account": "123456789012",
    "region": "us-east-1",
    "time": "2024-01-01T00:00:00Z",
}


class FakePublisher:
    """Records every publish call; optionally fails like an unreachable topic."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls = []

    def publish(self, subject, body):
        self.calls.append((subject, body))
        if self.error:
            raise self.error
        return "msg-0001"


@pytest.fixture
def sample_event() -> dict:
    return copy.deepcopy(SAMPLE_EVENT)


@pytest.fixture
def fake_publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def failing_publisher() -> FakePublisher:
    return FakePublisher(error=ChannelUnavailableError(TOPIC_ARN, "AuthorizationError: not allowed to publish"))


@pytest.fixture
def channel_env(monkeypatch):
    monkeypatch.delenv("SNS_TOPIC_ARN", raising=False)
    monkeypatch.setenv("ALERT_CHANNEL", TOPIC_ARN)
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    return TOPIC_ARN

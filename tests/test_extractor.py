# tests/test_extractor.py
import pytest

from lambdas.notify_finding.extractor import describe_resource, extract, validate_event
from lambdas.notify_finding.models import Finding, MalformedFindingError


def test_extracts_all_fields(sample_event: dict):
    sample_event["detail"]["id"] = "abc123"
    finding = extract(sample_event)

    assert finding == Finding(
        severity=8.0,
        finding_type="Backdoor:EC2/C&CActivity.B!DNS",
        description="EC2 instance communicating with a known command-and-control server.",
        resource_id="Instance",
        account_id="123456789012",
        region="us-east-1",
        timestamp="2024-01-01T00:00:00Z",
        finding_id="abc123",
    )
    assert isinstance(finding.severity, float)


@pytest.mark.parametrize("field", ["type", "description", "resource"])
def test_missing_optional_detail_field_becomes_unknown(sample_event: dict, field: str):
    del sample_event["detail"][field]

    finding = extract(sample_event)

    attribute = {"type": "finding_type", "description": "description", "resource": "resource_id"}[field]
    assert getattr(finding, attribute) == "unknown"
    assert finding.severity == 8.0


def test_missing_envelope_fields_become_unknown():
    finding = extract({"detail": {"severity": 5.5}})

    assert finding.severity == 5.5
    assert finding.account_id == "unknown"
    assert finding.region == "unknown"
    assert finding.timestamp == "unknown"
    assert finding.finding_type == "unknown"


@pytest.mark.parametrize("severity", [None, "8", "high", True, [8], float("nan"), -1, 10.5, 10**400, -10**400])
def test_invalid_severity_is_rejected(sample_event: dict, severity):
    sample_event["detail"]["severity"] = severity

    with pytest.raises(MalformedFindingError) as excinfo:
        extract(sample_event)
    assert excinfo.value.field == "detail.severity"


def test_missing_severity_is_rejected(sample_event: dict):
    del sample_event["detail"]["severity"]

    with pytest.raises(MalformedFindingError, match="detail.severity"):
        extract(sample_event)


@pytest.mark.parametrize("event", [None, "not-an-event", {}, {"detail": "oops"}])
def test_event_without_detail_object_is_rejected(event):
    result = validate_event(event)

    assert not result.ok
    assert result.finding is None
    assert isinstance(result.error, MalformedFindingError)


def test_validate_event_does_not_raise_for_bad_input():
    result = validate_event({"detail": {"type": "Recon:EC2/PortProbeUnprotectedPort"}})

    assert not result.ok
    assert result.error.field == "detail.severity"
    with pytest.raises(MalformedFindingError):
        result.unwrap()


def test_extract_does_not_modify_event(sample_event: dict):
    before = repr(sample_event)
    extract(sample_event)
    assert repr(sample_event) == before


@pytest.mark.parametrize("resource, expected", [
    ({"resourceType": "Instance", "instanceDetails": {"instanceId": "i-0abc"}}, "Instance i-0abc"),
    ({"resourceType": "AccessKey", "accessKeyDetails": {"accessKeyId": "AKIAEXAMPLE"}}, "AccessKey AKIAEXAMPLE"),
    ({"resourceType": "S3Bucket", "s3BucketDetails": [{"name": "my-bucket"}]}, "S3Bucket my-bucket"),
    ({"resourceType": "S3Bucket", "s3BucketDetails": []}, "S3Bucket"),
    ({"instanceDetails": {"instanceId": "i-0abc"}}, "i-0abc"),
    ("arn:aws:s3:::my-bucket", "arn:aws:s3:::my-bucket"),
    ({}, "unknown"),
    (42, "unknown"),
])
def test_describe_resource(resource, expected):
    assert describe_resource(resource) == expected


def test_huge_integer_severity_is_rejected_not_raised():
    result = validate_event({"detail": {"severity": 10**400}})

    assert not result.ok
    assert result.error.reason == "value is outside the range 0-10"

# lambdas/notify_finding/extractor.py
import math
from collections.abc import Mapping
from typing import Any

from .models import UNKNOWN, ExtractionResult, Finding, MalformedFindingError

# Resource sub-objects GuardDuty uses, paired with the key holding a readable id.
RESOURCE_ID_KEYS = [
    ("instanceDetails", "instanceId"),
    ("accessKeyDetails", "accessKeyId"),
    ("s3BucketDetails", "name"),
    ("eksClusterDetails", "name"),
    ("ecsClusterDetails", "name"),
    ("rdsDbInstanceDetails", "dbInstanceIdentifier"),
    ("lambdaDetails", "functionName"),
]

SEVERITY_FIELD = "detail.severity"


def _text_or_unknown(value: Any) -> str:
    if value is None:
        return UNKNOWN
    text = str(value).strip()
    return text or UNKNOWN


def _parse_severity(detail: Mapping) -> MalformedFindingError | float:
    """Returns the severity as a float, or the error describing why it is unusable."""
    if "severity" not in detail or detail["severity"] is None:
        return MalformedFindingError(SEVERITY_FIELD, "field is missing")

    severity = detail["severity"]
    # bool is an int subclass; a JSON true/false is not a severity.
    if isinstance(severity, bool) or not isinstance(severity, (int, float)):
        return MalformedFindingError(
            SEVERITY_FIELD, f"expected a number, got {type(severity).__name__}"
        )
    # Only floats can be NaN; math.isnan overflows on ints too large for a float.
    if isinstance(severity, float) and math.isnan(severity):
        return MalformedFindingError(SEVERITY_FIELD, "value is NaN")
    if not 0 <= severity <= 10:
        return MalformedFindingError(SEVERITY_FIELD, "value is outside the range 0-10")
    return float(severity)


def describe_resource(resource: Any) -> str:
    """
    Reduces the GuardDuty resource object to a short id such as
    "Instance i-0abc123" or "AccessKey AKIA...". Falls back to the bare
    resourceType, and to UNKNOWN when nothing usable is present.
    """
    if isinstance(resource, str):
        return _text_or_unknown(resource)
    if not isinstance(resource, Mapping):
        return UNKNOWN

    resource_type = _text_or_unknown(resource.get("resourceType"))
    for section, id_key in RESOURCE_ID_KEYS:
        details = resource.get(section)
        # s3BucketDetails is a list of buckets
        if isinstance(details, list):
            details = details[0] if details else None
        if isinstance(details, Mapping) and details.get(id_key):
            identifier = str(details[id_key])
            return identifier if resource_type == UNKNOWN else f"{resource_type} {identifier}"
    return resource_type


def validate_event(raw_event: Any) -> ExtractionResult:
    """
    Validates an EventBridge GuardDuty event and builds a Finding from it.

    Never raises for bad input: a missing or invalid severity is returned as a
    tagged error, and every other missing field is replaced with "unknown".
    """
    if not isinstance(raw_event, Mapping):
        return ExtractionResult(error=MalformedFindingError("event", "expected a JSON object"))

    detail = raw_event.get("detail")
    if not isinstance(detail, Mapping):
        return ExtractionResult(error=MalformedFindingError("detail", "field is missing or not an object"))

    severity = _parse_severity(detail)
    if isinstance(severity, MalformedFindingError):
        return ExtractionResult(error=severity)

    finding = Finding(
        severity=severity,
        finding_type=_text_or_unknown(detail.get("type")),
        description=_text_or_unknown(detail.get("description")),
        resource_id=describe_resource(detail.get("resource")),
        account_id=_text_or_unknown(raw_event.get("account")),
        region=_text_or_unknown(raw_event.get("region")),
        timestamp=_text_or_unknown(raw_event.get("time")),
        finding_id=_text_or_unknown(detail.get("id")),
    )

    missing = [
        name for name in ("finding_type", "description", "resource_id", "account_id", "region", "timestamp")
        if getattr(finding, name) == UNKNOWN
    ]
    if missing:
        print(f"⚠️ Finding is incomplete, using '{UNKNOWN}' for: {', '.join(missing)}")
    return ExtractionResult(finding=finding)


def extract(raw_event: Any) -> Finding:
    """
    Builds a Finding from the raw event.

    Raises:
        MalformedFindingError: If the event has no usable severity.
    """
    return validate_event(raw_event).unwrap()

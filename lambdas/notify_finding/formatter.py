# lambdas/notify_finding/formatter.py
from datetime import datetime

from .models import UNKNOWN, Finding, NotificationMessage

# Configuration
# Lower bound of each label, highest first. Matches the EventBridge rule that
# only forwards findings with severity >= 4 (Medium and above).
SEVERITY_LABELS = [
    (9.0, "Critical"),
    (7.0, "High"),
    (4.0, "Medium"),
    (0.0, "Low"),
]

# SNS rejects subjects longer than 100 characters or containing line breaks.
MAX_SUBJECT_LENGTH = 100

CONSOLE_URL = "https://{region}.console.aws.amazon.com/guardduty/home?region={region}#/findings?fId={finding_id}"


def severity_label(severity: float) -> str:
    """Buckets a numeric GuardDuty severity into its human label."""
    for lower_bound, label in SEVERITY_LABELS:
        if severity >= lower_bound:
            return label
    return "Low"


def format_timestamp(iso_string: str) -> str:
    """
    Renders the event "time" for the alert body as "YYYY-MM-DD HH:MM:SS UTC".
    A missing time stays "unknown"; an offset-less time drops the empty zone
    suffix; anything unparseable is shown exactly as GuardDuty sent it.
    """
    if not iso_string or iso_string == UNKNOWN:
        return UNKNOWN
    try:
        dt_object = datetime.fromisoformat(iso_string.replace('Z', '+00:00'))
        return dt_object.strftime('%Y-%m-%d %H:%M:%S %Z').strip()
    except (ValueError, TypeError):
        return iso_string


def console_url(finding: Finding) -> str:
    if UNKNOWN in (finding.region, finding.finding_id):
        return "N/A"
    return CONSOLE_URL.format(region=finding.region, finding_id=finding.finding_id)


def _format_subject(finding: Finding) -> str:
    subject = f"GuardDuty {severity_label(finding.severity)} severity finding: {finding.finding_type}"
    subject = " ".join(subject.split())
    if len(subject) > MAX_SUBJECT_LENGTH:
        subject = subject[:MAX_SUBJECT_LENGTH - 3] + "..."
    return subject


def format_text_body(finding: Finding) -> str:
    """Creates the plain text alert. The field order is fixed."""
    label = severity_label(finding.severity)
    lines = [
        "A GuardDuty finding requires attention.",
        "==================================================",
        # Unrounded, so 3.95 never reads as "4.0 (Low)".
        f"Severity: {finding.severity} ({label})",
        f"Type: {finding.finding_type}",
        f"Description: {finding.description}",
        f"Resource: {finding.resource_id}",
        f"Account: {finding.account_id}",
        f"Region: {finding.region}",
        f"Time: {format_timestamp(finding.timestamp)}",
        f"Finding ID: {finding.finding_id}",
        f"Console: {console_url(finding)}",
    ]
    return "\n".join(lines)


def format_message(finding: Finding) -> NotificationMessage:
    """Renders a Finding into the subject and body that get published."""
    return NotificationMessage(subject=_format_subject(finding), body=format_text_body(finding))

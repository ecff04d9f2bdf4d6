# lambdas/notify_finding/app.py
from typing import Any, Callable

from .dispatcher import Publisher, build_publisher, dispatch
from .extractor import extract
from .formatter import format_message
from .models import ConfigurationError, InvocationOutcome, MalformedFindingError
from .settings import load_settings


def handle(raw_event: Any, publisher_factory: Callable[..., Publisher] = build_publisher) -> InvocationOutcome:
    """
    Runs one finding through extract -> format -> dispatch.
    Every failure is turned into an InvocationOutcome; nothing is raised.
    """
    # --- 1. Resolve the target channel ---
    try:
        settings = load_settings()
        channel = publisher_factory(settings.channel_identifier, settings.aws_region)
    except ConfigurationError as e:
        print(f"❌ FATAL: Lambda is not configured correctly. {e}")
        return InvocationOutcome.failure(500, "ConfigurationError", str(e))

    # --- 2. Extract the finding ---
    try:
        finding = extract(raw_event)
    except MalformedFindingError as e:
        print(f"❌ Rejected malformed finding. Field '{e.field}': {e.reason}")
        return InvocationOutcome.failure(400, "MalformedFindingError", str(e))
    print(f"Processing finding '{finding.finding_type}' with severity {finding.severity}")

    # --- 3. Format and publish ---
    message = format_message(finding)
    result = dispatch(message, channel)
    if not result.delivered:
        return InvocationOutcome.failure(502, "ChannelUnavailableError", result.error_detail)

    return InvocationOutcome.success()


def handler(event, context):
    """
    Main Lambda handler, triggered by the EventBridge rule for GuardDuty findings.
    """
    print("--- NotifyFinding Lambda Triggered ---")
    outcome = handle(event)
    return outcome.to_response()

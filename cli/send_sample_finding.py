# cli/send_sample_finding.py
import argparse
import json
import uuid
from datetime import datetime, timezone

from dotenv import load_dotenv

from lambdas.notify_finding.app import handler
from lambdas.notify_finding.extractor import extract
from lambdas.notify_finding.formatter import format_message
from lambdas.notify_finding.models import MalformedFindingError

DEFAULT_TYPE = "Backdoor:EC2/C&CActivity.B!DNS"
DEFAULT_DESCRIPTION = "EC2 instance communicating with a known command-and-control server."


def create_sample_event(severity: float = 8, finding_type: str = DEFAULT_TYPE,
                        description: str = DEFAULT_DESCRIPTION, account: str = "123456789012",
                        region: str = "us-east-1") -> dict:
    """
    Builds an EventBridge "GuardDuty Finding" event with the fields the notifier reads.
    """
    finding_id = uuid.uuid4().hex
    return {
        "version": "0",
        "id": str(uuid.uuid4()),
        "detail-type": "GuardDuty Finding",
        "source": "aws.guardduty",
        "account": account,
        "time": datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ'),
        "region": region,
        "detail": {
            "id": finding_id,
            "severity": severity,
            "type": finding_type,
            "description": description,
            "resource": {
                "resourceType": "Instance",
                "instanceDetails": {"instanceId": "i-99999999"},
            },
        },
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Send a sample GuardDuty finding through the notifier.")
    parser.add_argument("--severity", type=float, default=8.0, help="Finding severity (0-10).")
    parser.add_argument("--type", dest="finding_type", default=DEFAULT_TYPE, help="GuardDuty finding type.")
    parser.add_argument("--event-file", help="Path to a JSON event to send instead of the generated sample.")
    parser.add_argument("--dry-run", action="store_true", help="Only print the formatted alert.")
    args = parser.parse_args(argv)

    # Load ALERT_CHANNEL and AWS credentials from a .env file for local testing
    load_dotenv()

    if args.event_file:
        with open(args.event_file, 'r', encoding='utf-8') as f:
            event = json.load(f)
    else:
        event = create_sample_event(severity=args.severity, finding_type=args.finding_type)

    if args.dry_run:
        try:
            message = format_message(extract(event))
        except MalformedFindingError as e:
            print(f"❌ ERROR: The event cannot be turned into an alert. {e}")
            return 1
        print(f"Subject: {message.subject}\n")
        print(message.body)
        return 0

    print("--- Invoking notifier handler (this publishes to the configured channel) ---")
    response = handler(event, None)
    print(json.dumps(response, indent=2))
    return 0 if response["statusCode"] == 200 else 1


if __name__ == "__main__":
    raise SystemExit(main())

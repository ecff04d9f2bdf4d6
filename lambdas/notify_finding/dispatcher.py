# lambdas/notify_finding/dispatcher.py
from typing import Optional, Protocol

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from .models import ChannelUnavailableError, ConfigurationError, DispatchResult, NotificationMessage

# Clients are reused across warm invocations, one per region.
_SNS_CLIENTS: dict = {}


class Publisher(Protocol):
    """A fan-out channel. Returns the channel's message id, if it has one."""

    def publish(self, subject: str, body: str) -> Optional[str]:
        ...


def get_sns_client(region: str):
    """
    Raises:
        ConfigurationError: If botocore refuses the region (e.g. "us east 1").
    """
    if region not in _SNS_CLIENTS:
        try:
            _SNS_CLIENTS[region] = boto3.client('sns', region_name=region)
        except (BotoCoreError, ValueError) as e:
            raise ConfigurationError(f"Cannot create an SNS client for region '{region}': {e}") from e
    return _SNS_CLIENTS[region]


class SnsTopicPublisher:
    """Publishes to an SNS topic through an existing boto3 client."""

    def __init__(self, topic_arn: str, client):
        self.topic_arn = topic_arn
        self.client = client

    def publish(self, subject: str, body: str) -> Optional[str]:
        try:
            response = self.client.publish(TopicArn=self.topic_arn, Subject=subject, Message=body)
        except ClientError as e:
            raise ChannelUnavailableError(self.topic_arn, e.response['Error']['Message']) from e
        except BotoCoreError as e:
            raise ChannelUnavailableError(self.topic_arn, str(e)) from e
        return response.get('MessageId')


class WebhookPublisher:
    """Posts the alert to a Slack-compatible incoming webhook."""

    def __init__(self, webhook_url: str, timeout: int = 10):
        self.webhook_url = webhook_url
        self.timeout = timeout

    def publish(self, subject: str, body: str) -> Optional[str]:
        try:
            response = requests.post(
                self.webhook_url, json={"text": f"*{subject}*\n{body}"}, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ChannelUnavailableError("webhook", str(e)) from e
        return None


def _region_from_arn(arn: str) -> Optional[str]:
    # arn:partition:sns:region:account:topic
    parts = arn.split(":")
    if len(parts) >= 6 and parts[3]:
        return parts[3]
    return None


def build_publisher(channel_identifier: str, default_region: str = "us-east-1") -> Publisher:
    """
    Turns the configured channel identifier into a Publisher.

    Raises:
        ConfigurationError: If the identifier is neither an SNS ARN nor an https URL.
    """
    identifier = (channel_identifier or "").strip()
    if identifier.startswith("arn:"):
        if ":sns:" not in identifier:
            raise ConfigurationError(f"Channel ARN is not an SNS topic: {identifier}")
        region = _region_from_arn(identifier) or default_region
        return SnsTopicPublisher(identifier, get_sns_client(region))
    if identifier.startswith("https://"):
        return WebhookPublisher(identifier)
    raise ConfigurationError(f"Unsupported channel identifier: '{identifier}'")


def dispatch(message: NotificationMessage, channel: Publisher) -> DispatchResult:
    """
    Makes exactly one publish attempt. Failures come back as a DispatchResult,
    never as an exception; retrying is left to the event source.
    """
    try:
        message_id = channel.publish(message.subject, message.body)
    except ChannelUnavailableError as e:
        print(f"❌ Could not publish the alert: {e}")
        return DispatchResult(delivered=False, error_detail=str(e))
    except Exception as e:
        print(f"❌ Unexpected error while publishing the alert: {e}")
        return DispatchResult(delivered=False, error_detail=f"{type(e).__name__}: {e}")

    print(f"✅ Alert published. MessageId: {message_id}")
    return DispatchResult(delivered=True, message_id=message_id)

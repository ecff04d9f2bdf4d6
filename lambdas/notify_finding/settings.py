# lambdas/notify_finding/settings.py
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ConfigurationError


class NotifierSettings(BaseSettings):
    """
    Manages env vars using Pydantic BaseSettings.
    ALERT_CHANNEL is an SNS topic ARN (or an https webhook URL); SNS_TOPIC_ARN is
    accepted as an alias so the usual CloudFormation wiring works unchanged.
    """
    model_config = SettingsConfigDict(extra='ignore')

    channel_identifier: str = Field(
        "", validation_alias=AliasChoices('ALERT_CHANNEL', 'SNS_TOPIC_ARN')
    )
    aws_region: str = Field("us-east-1", validation_alias='AWS_REGION')


def load_settings() -> NotifierSettings:
    """
    Reads the configuration from the environment. Called once per invocation so
    a changed environment is always picked up.

    Raises:
        ConfigurationError: If no channel identifier is configured.
    """
    settings = NotifierSettings()
    if not settings.channel_identifier.strip():
        raise ConfigurationError(
            "Missing required environment variable: ALERT_CHANNEL (or SNS_TOPIC_ARN)"
        )
    return settings

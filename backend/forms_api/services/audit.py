"""Form lifecycle audit events.

Messages are published to an SNS topic when PUBLISH_AUDIT_EVENTS is on.
Publishing is fire-and-forget: failures are logged and never reach the
HTTP caller.
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from forms_api.core.config import Settings
from forms_api.schemas.auth import Author

logger = logging.getLogger(__name__)

MESSAGE_SCHEMA_VERSION = 1
MESSAGE_SOURCE = "FORMS_CONFIG_API"
MESSAGE_CATEGORY = "FORM"


class AuditEventType(str, Enum):
    FORM_CREATED = "FORM_CREATED"
    FORM_UPDATED = "FORM_UPDATED"
    FORM_DELETED = "FORM_DELETED"
    FORM_DRAFT_UPDATED = "FORM_DRAFT_UPDATED"
    FORM_MIGRATED = "FORM_MIGRATED"
    FORM_LIVE_CREATED_FROM_DRAFT = "FORM_LIVE_CREATED_FROM_DRAFT"
    FORM_DRAFT_CREATED_FROM_LIVE = "FORM_DRAFT_CREATED_FROM_LIVE"


def build_form_message(
    event_type: AuditEventType,
    form_id: uuid.UUID,
    author: Author,
    data: dict[str, Any] | None = None,
    *,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    """Build the JSON-serialisable audit message for a form event."""
    now = datetime.now(UTC)
    return {
        "schemaVersion": MESSAGE_SCHEMA_VERSION,
        "category": MESSAGE_CATEGORY,
        "type": event_type.value,
        "entityId": str(form_id),
        "source": MESSAGE_SOURCE,
        "createdAt": (created_at or now).isoformat(),
        "createdBy": author.model_dump(by_alias=True),
        "data": data or {},
        "messageCreatedAt": now.isoformat(),
    }


class AuditPublisher(ABC):
    """Destination for audit messages."""

    @abstractmethod
    def publish(self, message: dict[str, Any]) -> None:
        """Deliver one message. Must not raise."""


class NullAuditPublisher(AuditPublisher):
    def publish(self, message: dict[str, Any]) -> None:
        logger.debug("Audit publishing disabled, dropping %s for %s", message["type"], message["entityId"])


class SnsAuditPublisher(AuditPublisher):
    """Publishes messages to an SNS topic as JSON strings."""

    def __init__(self, topic_arn: str, *, region: str, endpoint_url: str | None = None, client: Any = None) -> None:
        self.topic_arn = topic_arn
        self.region = region
        self.endpoint_url = endpoint_url
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "sns",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                config=Config(retries={"max_attempts": 3, "mode": "standard"}),
            )
        return self._client

    def publish(self, message: dict[str, Any]) -> None:
        try:
            response = self._get_client().publish(TopicArn=self.topic_arn, Message=json.dumps(message))
        except (BotoCoreError, ClientError):
            logger.exception("Failed to publish %s for %s", message["type"], message["entityId"])
            return
        logger.info(
            "Published %s for %s (message_id=%s)",
            message["type"],
            message["entityId"],
            response.get("MessageId"),
        )


def build_audit_publisher(settings: Settings) -> AuditPublisher:
    if not settings.PUBLISH_AUDIT_EVENTS:
        return NullAuditPublisher()
    return SnsAuditPublisher(
        settings.SNS_TOPIC_ARN,
        region=settings.AWS_REGION,
        endpoint_url=settings.SNS_ENDPOINT or None,
    )

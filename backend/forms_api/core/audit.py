import uuid
from typing import Any

from fastapi import BackgroundTasks, Request

from forms_api.schemas.auth import Author
from forms_api.services.audit import AuditEventType, AuditPublisher, build_form_message


class AuditTrail:
    """Queues audit messages to be published after the response is sent."""

    def __init__(self, publisher: AuditPublisher, background_tasks: BackgroundTasks) -> None:
        self.publisher = publisher
        self.background_tasks = background_tasks

    def record(
        self,
        event_type: AuditEventType,
        form_id: uuid.UUID,
        author: Author,
        data: dict[str, Any] | None = None,
    ) -> None:
        message = build_form_message(event_type, form_id, author, data)
        self.background_tasks.add_task(self.publisher.publish, message)


def get_audit_trail(request: Request, background_tasks: BackgroundTasks) -> AuditTrail:
    return AuditTrail(request.app.state.audit_publisher, background_tasks)

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forms_api.core.database import Base


class Form(Base):
    """Form metadata.

    ``draft`` and ``live`` hold audit stamps for each copy of the definition:
        {
            "createdAt": "2026-01-01T10:00:00+00:00",
            "createdBy": {"id": "...", "displayName": "..."},
            "updatedAt": "...",
            "updatedBy": {...}
        }
    Each is NULL until that copy exists, so the four fields come and go together.
    """

    __tablename__ = "forms"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    organisation: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    team_name: Mapped[str] = mapped_column(String(255), nullable=False)
    team_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact: Mapped[dict | None] = mapped_column(JSONB(none_as_null=True))
    submission_guidance: Mapped[str | None] = mapped_column(Text)
    privacy_notice_url: Mapped[str | None] = mapped_column(String(500))
    notification_email: Mapped[str | None] = mapped_column(String(255))

    draft: Mapped[dict | None] = mapped_column(JSONB(none_as_null=True))
    live: Mapped[dict | None] = mapped_column(JSONB(none_as_null=True))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_by_name: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_by_id: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_by_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    definitions: Mapped[list["FormDefinition"]] = relationship(
        back_populates="form", cascade="all, delete-orphan"
    )

    @property
    def created_by(self) -> dict:
        return {"id": self.created_by_id, "displayName": self.created_by_name}

    @property
    def updated_by(self) -> dict:
        return {"id": self.updated_by_id, "displayName": self.updated_by_name}

    @property
    def is_live(self) -> bool:
        return self.live is not None

    def __repr__(self) -> str:
        return f"<Form {self.slug} ({'live' if self.is_live else 'draft'})>"

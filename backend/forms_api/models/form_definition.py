import uuid
from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forms_api.core.database import Base


class FormDefinition(Base):
    """One JSON definition document per form per state (draft or live).

    ``revision`` is bumped on every write; a stale writer fails with
    ``StaleDataError`` instead of silently overwriting a newer document.
    """

    __tablename__ = "form_definitions"
    __table_args__ = (UniqueConstraint("form_id", "state", name="uq_form_definitions_form_state"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    form_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    state: Mapped[str] = mapped_column(
        Enum("draft", "live", name="definition_state"),
        nullable=False,
    )
    definition: Mapped[dict] = mapped_column(JSONB, nullable=False)
    revision: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    form: Mapped["Form"] = relationship(back_populates="definitions")

    __mapper_args__ = {"version_id_col": revision}

    def __repr__(self) -> str:
        return f"<FormDefinition {self.form_id} {self.state} r{self.revision}>"

"""create forms and form_definitions tables

Revision ID: c7e1a2b3d4f5
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "c7e1a2b3d4f5"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    definition_state = postgresql.ENUM("draft", "live", name="definition_state", create_type=False)
    definition_state.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "forms",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("organisation", sa.String(length=255), nullable=False),
        sa.Column("team_name", sa.String(length=255), nullable=False),
        sa.Column("team_email", sa.String(length=255), nullable=False),
        sa.Column("contact", postgresql.JSONB(), nullable=True),
        sa.Column("submission_guidance", sa.Text(), nullable=True),
        sa.Column("privacy_notice_url", sa.String(length=500), nullable=True),
        sa.Column("notification_email", sa.String(length=255), nullable=True),
        sa.Column("draft", postgresql.JSONB(), nullable=True),
        sa.Column("live", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by_id", sa.String(length=255), nullable=False),
        sa.Column("created_by_name", sa.String(length=255), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_by_id", sa.String(length=255), nullable=False),
        sa.Column("updated_by_name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_forms_slug", "forms", ["slug"], unique=True)
    op.create_index("ix_forms_organisation", "forms", ["organisation"], unique=False)
    op.create_index("ix_forms_updated_by_name", "forms", ["updated_by_name"], unique=False)

    op.create_table(
        "form_definitions",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("form_id", sa.UUID(), nullable=False),
        sa.Column(
            "state",
            postgresql.ENUM("draft", "live", name="definition_state", create_type=False),
            nullable=False,
        ),
        sa.Column("definition", postgresql.JSONB(), nullable=False),
        sa.Column("revision", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("form_id", "state", name="uq_form_definitions_form_state"),
    )
    op.create_index("ix_form_definitions_form_id", "form_definitions", ["form_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_form_definitions_form_id", table_name="form_definitions")
    op.drop_table("form_definitions")

    op.drop_index("ix_forms_updated_by_name", table_name="forms")
    op.drop_index("ix_forms_organisation", table_name="forms")
    op.drop_index("ix_forms_slug", table_name="forms")
    op.drop_table("forms")

    op.execute("DROP TYPE IF EXISTS definition_state")

"""Form metadata: create, list, read, update and delete forms."""

import logging
import math
import re
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from forms_api.models import Form
from forms_api.schemas.auth import Author
from forms_api.schemas.forms import (
    FilterOptions,
    FormListMeta,
    FormListResponse,
    FormMetadataInput,
    FormMetadataResponse,
    FormMetadataUpdate,
    FormStatus,
    Pagination,
)
from forms_api.services.definition import DefinitionState, empty_definition
from forms_api.services.definition.store import save, write_definition
from forms_api.services.exceptions import ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("title", "organisation", "team_name", "team_email")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def new_stamp(author: Author, now: datetime) -> dict[str, Any]:
    who = author.model_dump(by_alias=True)
    return {"createdAt": now.isoformat(), "createdBy": who, "updatedAt": now.isoformat(), "updatedBy": who}


def touch_stamp(stamp: dict[str, Any] | None, author: Author, now: datetime) -> dict[str, Any]:
    """Refresh the ``updated*`` half of a stamp, creating the stamp if absent.

    Returns a new dict so the JSON column sees the change.
    """
    if stamp is None:
        return new_stamp(author, now)
    return {**stamp, "updatedAt": now.isoformat(), "updatedBy": author.model_dump(by_alias=True)}


def touch_form(form: Form, author: Author, now: datetime) -> None:
    form.updated_at = now
    form.updated_by_id = author.id
    form.updated_by_name = author.display_name


def mark_draft_updated(form: Form, author: Author, now: datetime | None = None) -> None:
    now = now or datetime.now(UTC)
    form.draft = touch_stamp(form.draft, author, now)
    touch_form(form, author, now)


def _ensure_slug_free(db: Session, slug: str, *, ignore_id: uuid.UUID | None = None) -> None:
    query = select(Form.id).where(Form.slug == slug)
    if ignore_id is not None:
        query = query.where(Form.id != ignore_id)
    if db.execute(query).first() is not None:
        raise ConflictError(f"Form with slug {slug} already exists")


def _slug_for(title: str) -> str:
    slug = slugify(title)
    if not slug:
        raise InvalidInputError(f"Cannot derive a slug from title '{title}'")
    return slug


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_form(db: Session, form_id: uuid.UUID) -> Form:
    form = db.get(Form, form_id)
    if form is None:
        raise NotFoundError(f"Form {form_id} not found")
    return form


def get_form_by_slug(db: Session, slug: str) -> Form:
    form = db.execute(select(Form).where(Form.slug == slug)).scalar_one_or_none()
    if form is None:
        raise NotFoundError(f"Form with slug {slug} not found")
    return form


def list_live_slugs(db: Session) -> list[str]:
    return list(db.execute(select(Form.slug).where(Form.live.is_not(None)).order_by(Form.slug)).scalars())


def _filter_options(db: Session) -> FilterOptions:
    authors = db.execute(select(Form.updated_by_name).distinct().order_by(Form.updated_by_name)).scalars()
    organisations = db.execute(select(Form.organisation).distinct().order_by(Form.organisation)).scalars()

    status: list[FormStatus] = []
    if db.execute(select(Form.id).where(Form.live.is_(None)).limit(1)).first() is not None:
        status.append("draft")
    if db.execute(select(Form.id).where(Form.live.is_not(None)).limit(1)).first() is not None:
        status.append("live")

    return FilterOptions(authors=list(authors), organisations=list(organisations), status=status)


def list_forms(
    db: Session,
    *,
    page: int = 1,
    per_page: int = 25,
    title: str | None = None,
    author: str | None = None,
    organisations: list[str] | None = None,
    status: list[FormStatus] | None = None,
) -> FormListResponse:
    """Return one page of forms, most recently updated first, with the available filter values."""
    conditions = []
    if title:
        conditions.append(Form.title.ilike(f"%{title}%"))
    if author:
        conditions.append(or_(Form.created_by_name == author, Form.updated_by_name == author))
    if organisations:
        conditions.append(Form.organisation.in_(organisations))
    if status and set(status) != {"draft", "live"}:
        conditions.append(Form.live.is_not(None) if "live" in status else Form.live.is_(None))

    total = db.execute(select(func.count()).select_from(Form).where(*conditions)).scalar_one()
    forms = db.execute(
        select(Form)
        .where(*conditions)
        .order_by(Form.updated_at.desc(), Form.title)
        .offset((page - 1) * per_page)
        .limit(per_page)
    ).scalars()

    return FormListResponse(
        data=[FormMetadataResponse.model_validate(form) for form in forms],
        meta=FormListMeta(
            pagination=Pagination(
                page=page,
                per_page=per_page,
                total_items=total,
                total_pages=math.ceil(total / per_page),
            ),
            filters=_filter_options(db),
        ),
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def create_form(db: Session, payload: FormMetadataInput, author: Author) -> Form:
    """Create form metadata and its initial draft definition."""
    slug = _slug_for(payload.title)
    _ensure_slug_free(db, slug)

    now = datetime.now(UTC)
    form = Form(
        id=uuid.uuid4(),
        slug=slug,
        title=payload.title,
        organisation=payload.organisation,
        team_name=payload.team_name,
        team_email=payload.team_email,
        draft=new_stamp(author, now),
        created_at=now,
        created_by_id=author.id,
        created_by_name=author.display_name,
        updated_at=now,
        updated_by_id=author.id,
        updated_by_name=author.display_name,
    )
    db.add(form)
    db.flush()
    write_definition(db, form.id, DefinitionState.DRAFT, empty_definition(payload.title))
    save(db)
    db.refresh(form)

    logger.info("Created form id=%s slug=%s by=%s", form.id, form.slug, author.id)
    return form


def update_form_metadata(db: Session, form_id: uuid.UUID, payload: FormMetadataUpdate, author: Author) -> Form:
    form = get_form(db, form_id)
    fields = payload.model_dump(exclude_unset=True)
    if not fields:
        raise InvalidInputError("No fields to update")
    for required in _REQUIRED_FIELDS:
        if required in fields and fields[required] is None:
            raise InvalidInputError(f"{required} cannot be null")

    title = fields.get("title")
    if title is not None and title != form.title:
        if form.is_live:
            raise InvalidInputError(f"Cannot change the title of live form {form_id}")
        slug = _slug_for(title)
        _ensure_slug_free(db, slug, ignore_id=form.id)
        form.slug = slug

    for field, value in fields.items():
        setattr(form, field, value)
    touch_form(form, author, datetime.now(UTC))
    save(db)
    db.refresh(form)

    logger.info("Updated form id=%s fields=%s by=%s", form.id, sorted(fields), author.id)
    return form


def remove_form(db: Session, form_id: uuid.UUID) -> None:
    form = get_form(db, form_id)
    if form.is_live:
        raise InvalidInputError(f"Form {form_id} is live and cannot be deleted")

    slug = form.slug
    db.delete(form)
    save(db)
    logger.info("Deleted form id=%s slug=%s", form_id, slug)

"""Form metadata API: CRUD, slug lookups and the draft/live transitions."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from forms_api.core.audit import AuditTrail, get_audit_trail
from forms_api.core.auth import get_author, require_scope
from forms_api.core.database import get_db
from forms_api.schemas.auth import Author
from forms_api.schemas.forms import (
    FormListResponse,
    FormMetadataInput,
    FormMetadataResponse,
    FormMetadataUpdate,
    FormSlugsResponse,
    FormStatus,
    FormStatusResponse,
)
from forms_api.services import definitions as definition_service
from forms_api.services import forms as form_service
from forms_api.services.audit import AuditEventType

router = APIRouter()


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("", response_model=FormListResponse, dependencies=[Depends(require_scope("form-read"))])
def list_forms(
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=100, alias="perPage"),
    title: str | None = Query(None),
    author: str | None = Query(None),
    organisations: list[str] | None = Query(None),
    status: list[FormStatus] | None = Query(None),
    db: Session = Depends(get_db),
):
    return form_service.list_forms(
        db,
        page=page,
        per_page=per_page,
        title=title,
        author=author,
        organisations=organisations,
        status=status,
    )


@router.get("/slugs", response_model=FormSlugsResponse)
def list_live_slugs(db: Session = Depends(get_db)):
    return FormSlugsResponse(slugs=form_service.list_live_slugs(db))


@router.get("/slug/{slug}", response_model=FormMetadataResponse)
def get_form_by_slug(slug: str, db: Session = Depends(get_db)):
    return form_service.get_form_by_slug(db, slug)


@router.get("/{form_id}", response_model=FormMetadataResponse)
def get_form(form_id: uuid.UUID, db: Session = Depends(get_db)):
    return form_service.get_form(db, form_id)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


@router.post("", response_model=FormStatusResponse, dependencies=[Depends(require_scope("form-edit"))])
def create_form(
    payload: FormMetadataInput,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = form_service.create_form(db, payload, author)
    audit.record(AuditEventType.FORM_CREATED, form.id, author, payload.model_dump(mode="json", by_alias=True))
    return FormStatusResponse(id=form.id, slug=form.slug, status="created")


@router.patch("/{form_id}", response_model=FormStatusResponse, dependencies=[Depends(require_scope("form-edit"))])
def update_form(
    form_id: uuid.UUID,
    payload: FormMetadataUpdate,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = form_service.update_form_metadata(db, form_id, payload, author)
    changes = payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    audit.record(AuditEventType.FORM_UPDATED, form.id, author, changes)
    return FormStatusResponse(id=form.id, slug=form.slug, status="updated")


@router.delete(
    "/{form_id}",
    response_model=FormStatusResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_scope("form-delete"))],
)
def delete_form(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form_service.remove_form(db, form_id)
    audit.record(AuditEventType.FORM_DELETED, form_id, author)
    return FormStatusResponse(id=form_id, status="deleted")


# ---------------------------------------------------------------------------
# Draft / live transitions
# ---------------------------------------------------------------------------


@router.post(
    "/{form_id}/create-live",
    response_model=FormStatusResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_scope("form-publish"))],
)
def create_live_from_draft(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = definition_service.create_live_from_draft(db, form_id, author)
    audit.record(AuditEventType.FORM_LIVE_CREATED_FROM_DRAFT, form.id, author, {"slug": form.slug})
    return FormStatusResponse(id=form.id, status="created-live")


@router.post(
    "/{form_id}/create-draft",
    response_model=FormStatusResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_scope("form-edit"))],
)
def create_draft_from_live(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = definition_service.create_draft_from_live(db, form_id, author)
    audit.record(AuditEventType.FORM_DRAFT_CREATED_FROM_LIVE, form.id, author, {"slug": form.slug})
    return FormStatusResponse(id=form.id, status="created-draft")

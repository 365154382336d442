"""Whole-document definition API: read live/draft, replace the draft, migrate to V2."""

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from forms_api.core.audit import AuditTrail, get_audit_trail
from forms_api.core.auth import get_author, require_scope
from forms_api.core.database import get_db
from forms_api.schemas.auth import Author
from forms_api.schemas.definition import FormDefinitionDocument
from forms_api.schemas.forms import FormStatusResponse
from forms_api.services import definitions as definition_service
from forms_api.services.audit import AuditEventType
from forms_api.services.definition import DefinitionState

router = APIRouter()


@router.get("")
def get_live_definition(form_id: uuid.UUID, db: Session = Depends(get_db)) -> dict[str, Any]:
    return definition_service.get_form_definition(db, form_id, DefinitionState.LIVE)


@router.get("/draft")
def get_draft_definition(form_id: uuid.UUID, db: Session = Depends(get_db)) -> dict[str, Any]:
    return definition_service.get_form_definition(db, form_id, DefinitionState.DRAFT)


@router.post(
    "/draft",
    response_model=FormStatusResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_scope("form-edit"))],
)
def replace_draft_definition(
    form_id: uuid.UUID,
    payload: FormDefinitionDocument,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    document = payload.to_document()
    definition_service.replace_draft_definition(db, form_id, document, author)
    audit.record(AuditEventType.FORM_DRAFT_UPDATED, form_id, author, {"change": "definition-replaced"})
    return FormStatusResponse(id=form_id, status="updated")


@router.post("/draft/migrate/v2", dependencies=[Depends(require_scope("form-edit"))])
def migrate_draft_to_v2(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
) -> dict[str, Any]:
    migrated = definition_service.migrate_draft_to_v2(db, form_id, author)
    audit.record(AuditEventType.FORM_MIGRATED, form_id, author, {"engine": migrated["engine"]})
    return migrated

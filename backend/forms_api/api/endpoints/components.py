import uuid
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from forms_api.core.audit import AuditTrail, get_audit_trail
from forms_api.core.auth import get_author, require_scope
from forms_api.core.database import get_db
from forms_api.schemas.auth import Author
from forms_api.schemas.definition import ComponentInput, ItemStatusResponse
from forms_api.services.audit import AuditEventType
from forms_api.services.definition import create_component, delete_component, update_component
from forms_api.services.definitions import apply_draft_edit

router = APIRouter(dependencies=[Depends(require_scope("form-edit"))])


@router.post("")
def add_component(
    form_id: uuid.UUID,
    page_id: str,
    payload: ComponentInput,
    prepend: bool = Query(False),
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
) -> dict[str, Any]:
    component = apply_draft_edit(
        db,
        form_id,
        author,
        lambda definition: create_component(definition, page_id, payload.to_document(exclude={"id"}), prepend=prepend),
    )
    audit.record(
        AuditEventType.FORM_DRAFT_UPDATED,
        form_id,
        author,
        {"change": "component-created", "pageId": page_id, "componentId": component["id"]},
    )
    return component


@router.put("/{component_id}")
def replace_component(
    form_id: uuid.UUID,
    page_id: str,
    component_id: str,
    payload: ComponentInput,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
) -> dict[str, Any]:
    component = apply_draft_edit(
        db,
        form_id,
        author,
        lambda definition: update_component(definition, page_id, component_id, payload.to_document()),
    )
    audit.record(
        AuditEventType.FORM_DRAFT_UPDATED,
        form_id,
        author,
        {"change": "component-updated", "pageId": page_id, "componentId": component_id},
    )
    return component


@router.delete("/{component_id}", response_model=ItemStatusResponse)
def remove_component(
    form_id: uuid.UUID,
    page_id: str,
    component_id: str,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    apply_draft_edit(db, form_id, author, lambda definition: delete_component(definition, page_id, component_id))
    audit.record(
        AuditEventType.FORM_DRAFT_UPDATED,
        form_id,
        author,
        {"change": "component-deleted", "pageId": page_id, "componentId": component_id},
    )
    return ItemStatusResponse(id=component_id, status="deleted")

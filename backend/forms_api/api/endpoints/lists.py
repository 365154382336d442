import uuid
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from forms_api.core.audit import AuditTrail, get_audit_trail
from forms_api.core.auth import get_author, require_scope
from forms_api.core.database import get_db
from forms_api.schemas.auth import Author
from forms_api.schemas.definition import ItemStatusResponse, ListInput
from forms_api.services.audit import AuditEventType
from forms_api.services.definition import create_list, delete_list, update_list
from forms_api.services.definitions import apply_draft_edit

router = APIRouter(dependencies=[Depends(require_scope("form-edit"))])


@router.post("")
def add_list(
    form_id: uuid.UUID,
    payload: ListInput,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
) -> dict[str, Any]:
    created = apply_draft_edit(
        db, form_id, author, lambda definition: create_list(definition, payload.to_document(exclude={"id"}))
    )
    audit.record(
        AuditEventType.FORM_DRAFT_UPDATED, form_id, author, {"change": "list-created", "listId": created["id"]}
    )
    return created


@router.put("/{list_id}")
def replace_list(
    form_id: uuid.UUID,
    list_id: str,
    payload: ListInput,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
) -> dict[str, Any]:
    updated = apply_draft_edit(
        db, form_id, author, lambda definition: update_list(definition, list_id, payload.to_document())
    )
    audit.record(AuditEventType.FORM_DRAFT_UPDATED, form_id, author, {"change": "list-updated", "listId": list_id})
    return updated


@router.delete("/{list_id}", response_model=ItemStatusResponse)
def remove_list(
    form_id: uuid.UUID,
    list_id: str,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    apply_draft_edit(db, form_id, author, lambda definition: delete_list(definition, list_id))
    audit.record(AuditEventType.FORM_DRAFT_UPDATED, form_id, author, {"change": "list-deleted", "listId": list_id})
    return ItemStatusResponse(id=list_id, status="deleted")

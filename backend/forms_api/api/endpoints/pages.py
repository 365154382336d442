import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from forms_api.core.audit import AuditTrail, get_audit_trail
from forms_api.core.auth import get_author, require_scope
from forms_api.core.database import get_db
from forms_api.schemas.auth import Author
from forms_api.schemas.definition import ItemStatusResponse, PageInput, PagePatch
from forms_api.services.audit import AuditEventType
from forms_api.services.definition import create_page, delete_page, reorder_pages, update_page
from forms_api.services.definitions import apply_draft_edit

router = APIRouter(dependencies=[Depends(require_scope("form-edit"))])


@router.post("")
def add_page(
    form_id: uuid.UUID,
    payload: PageInput,
    position: int | None = Query(None, ge=0),
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
) -> dict[str, Any]:
    page = apply_draft_edit(
        db, form_id, author, lambda definition: create_page(definition, payload.to_document(), position=position)
    )
    audit.record(AuditEventType.FORM_DRAFT_UPDATED, form_id, author, {"change": "page-created", "pageId": page["id"]})
    return page


@router.post("/order")
def reorder(
    form_id: uuid.UUID,
    order: list[str] = Body(...),
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
) -> dict[str, Any]:
    definition = apply_draft_edit(db, form_id, author, lambda definition: reorder_pages(definition, order))
    audit.record(AuditEventType.FORM_DRAFT_UPDATED, form_id, author, {"change": "pages-reordered"})
    return definition


@router.patch("/{page_id}")
def patch_page(
    form_id: uuid.UUID,
    page_id: str,
    payload: PagePatch,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
) -> dict[str, Any]:
    page = apply_draft_edit(
        db, form_id, author, lambda definition: update_page(definition, page_id, payload.to_document())
    )
    audit.record(AuditEventType.FORM_DRAFT_UPDATED, form_id, author, {"change": "page-updated", "pageId": page_id})
    return page


@router.delete("/{page_id}", response_model=ItemStatusResponse)
def remove_page(
    form_id: uuid.UUID,
    page_id: str,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    apply_draft_edit(db, form_id, author, lambda definition: delete_page(definition, page_id))
    audit.record(AuditEventType.FORM_DRAFT_UPDATED, form_id, author, {"change": "page-deleted", "pageId": page_id})
    return ItemStatusResponse(id=page_id, status="deleted")

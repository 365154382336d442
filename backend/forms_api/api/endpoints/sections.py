import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from forms_api.core.audit import AuditTrail, get_audit_trail
from forms_api.core.auth import get_author, require_scope
from forms_api.core.database import get_db
from forms_api.schemas.auth import Author
from forms_api.schemas.definition import SectionAssignment, SectionsResponse
from forms_api.services.audit import AuditEventType
from forms_api.services.definition import assign_sections
from forms_api.services.definitions import apply_draft_edit

router = APIRouter(dependencies=[Depends(require_scope("form-edit"))])


@router.put("", response_model=SectionsResponse)
def put_sections(
    form_id: uuid.UUID,
    payload: SectionAssignment,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    incoming = [section.to_document(exclude={"id"}) for section in payload.sections]
    sections = apply_draft_edit(
        db, form_id, author, lambda definition: assign_sections(definition, incoming, payload.request_type)
    )
    audit.record(
        AuditEventType.FORM_DRAFT_UPDATED,
        form_id,
        author,
        {"change": "sections-assigned", "requestType": payload.request_type.value},
    )
    return SectionsResponse(id=form_id, sections=sections, status="updated")

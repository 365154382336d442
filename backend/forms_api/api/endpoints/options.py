import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from forms_api.core.audit import AuditTrail, get_audit_trail
from forms_api.core.auth import get_author, require_scope
from forms_api.core.database import get_db
from forms_api.schemas.auth import Author
from forms_api.schemas.definition import OptionInput, OptionResponse
from forms_api.services.audit import AuditEventType
from forms_api.services.definition import set_option
from forms_api.services.definitions import apply_draft_edit

router = APIRouter(dependencies=[Depends(require_scope("form-edit"))])


@router.post("/{option_name}", response_model=OptionResponse)
def update_option(
    form_id: uuid.UUID,
    option_name: str,
    payload: OptionInput,
    db: Session = Depends(get_db),
    author: Author = Depends(get_author),
    audit: AuditTrail = Depends(get_audit_trail),
):
    value = apply_draft_edit(
        db, form_id, author, lambda definition: set_option(definition, option_name, payload.option_value)
    )
    audit.record(
        AuditEventType.FORM_DRAFT_UPDATED,
        form_id,
        author,
        {"change": "option-updated", "option": option_name, "value": value},
    )
    return OptionResponse(option={option_name: value})

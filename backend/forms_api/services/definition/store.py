"""Reads and writes definition documents.

Readers always get a deep copy so an edit that fails half-way never leaks
into the session's cached document. Writers do not commit; services call
``save`` once per operation.
"""

import copy
import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from forms_api.models import FormDefinition
from forms_api.services.definition.models import DefinitionState
from forms_api.services.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def get_definition_row(db: Session, form_id: uuid.UUID, state: DefinitionState) -> FormDefinition | None:
    return db.execute(
        select(FormDefinition).where(
            FormDefinition.form_id == form_id,
            FormDefinition.state == state.value,
        )
    ).scalar_one_or_none()


def read_definition(db: Session, form_id: uuid.UUID, state: DefinitionState) -> dict[str, Any]:
    row = get_definition_row(db, form_id, state)
    if row is None:
        raise NotFoundError(f"Form {form_id} has no {state.value} definition")
    return copy.deepcopy(row.definition)


def write_definition(
    db: Session,
    form_id: uuid.UUID,
    state: DefinitionState,
    document: dict[str, Any],
) -> FormDefinition:
    """Insert or replace the document for ``(form_id, state)``."""
    row = get_definition_row(db, form_id, state)
    if row is None:
        row = FormDefinition(form_id=form_id, state=state.value, definition=document)
        db.add(row)
    else:
        row.definition = document
    return row


def save(db: Session) -> None:
    """Commit the unit of work, reporting lost races and duplicate keys as conflicts."""
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        logger.warning("Concurrent definition write rejected: %s", exc)
        raise ConflictError("The definition was changed by another request, retry with a fresh copy") from exc
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Integrity error on commit: %s", exc.orig)
        raise ConflictError("A form with the same unique value already exists") from exc

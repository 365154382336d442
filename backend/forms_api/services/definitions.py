"""Draft edits, migration and publishing.

Every operation reads a fresh copy of the stored document, changes it in
memory and writes it back in a single commit. Edits only ever touch the
draft; the live copy changes only through ``create_live_from_draft``.
"""

import copy
import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from sqlalchemy.orm import Session

from forms_api.models import Form
from forms_api.schemas.auth import Author
from forms_api.services.definition import DefinitionState, ensure_valid, migrate_to_v2
from forms_api.services.definition.store import read_definition, save, write_definition
from forms_api.services.exceptions import InvalidInputError
from forms_api.services.forms import get_form, mark_draft_updated, touch_form, touch_stamp

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_form_definition(db: Session, form_id: uuid.UUID, state: DefinitionState) -> dict[str, Any]:
    get_form(db, form_id)
    return read_definition(db, form_id, state)


def _write_draft(db: Session, form: Form, document: dict[str, Any], author: Author) -> None:
    write_definition(db, form.id, DefinitionState.DRAFT, document)
    mark_draft_updated(form, author)
    save(db)


def apply_draft_edit(
    db: Session,
    form_id: uuid.UUID,
    author: Author,
    edit: Callable[[dict[str, Any]], T],
) -> T:
    """Run ``edit`` against the draft document and persist the result.

    ``edit`` mutates the document in place and returns whatever the caller
    should respond with. If it raises, nothing is written.
    """
    form = get_form(db, form_id)
    document = read_definition(db, form.id, DefinitionState.DRAFT)
    result = edit(document)
    _write_draft(db, form, document, author)
    return result


def replace_draft_definition(
    db: Session, form_id: uuid.UUID, document: dict[str, Any], author: Author
) -> dict[str, Any]:
    """Replace the whole draft. References may dangle until publish; duplicates may not."""
    ensure_valid(document, "Draft definition is invalid", check_references=False)
    form = get_form(db, form_id)
    _write_draft(db, form, document, author)
    logger.info("Replaced draft definition form_id=%s by=%s", form_id, author.id)
    return document


def migrate_draft_to_v2(db: Session, form_id: uuid.UUID, author: Author) -> dict[str, Any]:
    form = get_form(db, form_id)
    migrated = migrate_to_v2(read_definition(db, form.id, DefinitionState.DRAFT))
    _write_draft(db, form, migrated, author)
    return migrated


def create_live_from_draft(db: Session, form_id: uuid.UUID, author: Author) -> Form:
    """Publish: the live document becomes a copy of the current draft.

    The draft must pass full validation; on failure nothing is written.
    """
    form = get_form(db, form_id)
    draft = read_definition(db, form.id, DefinitionState.DRAFT)
    ensure_valid(draft, "Draft cannot be published")

    write_definition(db, form.id, DefinitionState.LIVE, copy.deepcopy(draft))

    now = datetime.now(UTC)
    first_publish = form.live is None
    form.live = touch_stamp(form.live, author, now)
    touch_form(form, author, now)
    save(db)

    logger.info("Published form id=%s slug=%s first=%s by=%s", form.id, form.slug, first_publish, author.id)
    return form


def create_draft_from_live(db: Session, form_id: uuid.UUID, author: Author) -> Form:
    """Discard the draft in favour of a copy of the live document."""
    form = get_form(db, form_id)
    if not form.is_live:
        raise InvalidInputError(f"Form {form_id} has no live definition to copy")

    live = read_definition(db, form.id, DefinitionState.LIVE)
    write_definition(db, form.id, DefinitionState.DRAFT, live)
    mark_draft_updated(form, author)
    save(db)

    logger.info("Created draft from live form id=%s by=%s", form.id, author.id)
    return form

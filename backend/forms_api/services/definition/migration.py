"""V1 -> V2 definition migration.

V1 documents may omit page ids and name controllers by legacy module path.
V2 requires ids on pages, components, lists and sections, names controllers
by ``ControllerType`` and restates summary pages in their canonical shape.

A document already marked V2 is validated and returned as an equal copy, so
migration is idempotent whatever shape the V2 document was written in.
"""

import copy
import logging
from typing import Any

from forms_api.services.definition.builders import build_summary_page, new_id
from forms_api.services.definition.models import (
    LEGACY_CONTROLLERS,
    ControllerType,
    Engine,
    SchemaVersion,
)
from forms_api.services.definition.validation import (
    find_navigation_errors,
    find_uniqueness_errors,
)
from forms_api.services.exceptions import StructuralInvalidError

logger = logging.getLogger(__name__)


def _with_id(item: dict[str, Any]) -> dict[str, Any]:
    return item if item.get("id") else {**item, "id": new_id()}


def _migrate_page(page: dict[str, Any]) -> dict[str, Any]:
    page = _with_id(page)
    components = [_with_id(c) for c in page.get("components") or []]

    controller = page.get("controller")
    if controller is not None:
        controller = LEGACY_CONTROLLERS.get(controller, controller)

    if controller == ControllerType.SUMMARY.value:
        extras = {key: value for key, value in page.items() if key != "next"}
        canonical = build_summary_page(
            id=page["id"],
            title=page.get("title", ""),
            path=page["path"],
            components=components,
        )
        return {**extras, **canonical}

    migrated = dict(page)
    if "components" in page:
        migrated["components"] = components
    if controller is not None:
        migrated["controller"] = controller
    return migrated


def is_v2(definition: dict[str, Any]) -> bool:
    return definition.get("engine") == Engine.V2.value


def migrate_to_v2(definition: dict[str, Any]) -> dict[str, Any]:
    """Return a V2 copy of ``definition``; the input is left untouched.

    A V2 input comes back unchanged apart from being copied.

    Raises StructuralInvalidError for duplicate paths/names or ``next``
    links to missing pages. These are reported, never repaired.
    """
    errors = find_uniqueness_errors(definition) + find_navigation_errors(definition)
    if errors:
        raise StructuralInvalidError("Definition cannot be migrated to V2", errors)

    source = copy.deepcopy(definition)
    if is_v2(definition):
        return source

    migrated = {
        **source,
        "engine": Engine.V2.value,
        "schema": SchemaVersion.V2.value,
        "pages": [_migrate_page(page) for page in source.get("pages") or []],
    }
    if "lists" in source:
        migrated["lists"] = [_with_id(lst) for lst in source["lists"]]
    if "sections" in source:
        migrated["sections"] = [_with_id(section) for section in source["sections"]]

    logger.info(
        "Migrated definition '%s' to V2 (%d pages)",
        definition.get("name", ""),
        len(migrated["pages"]),
    )
    return migrated

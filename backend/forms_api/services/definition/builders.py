"""Canonical shapes for definition documents."""

import uuid
from typing import Any

from forms_api.services.definition.models import ControllerType, Engine, SchemaVersion
from forms_api.services.exceptions import ConflictError

SUMMARY_PATH = "/summary"


def new_id() -> str:
    return str(uuid.uuid4())


def build_summary_page(
    *,
    id: str | None = None,
    title: str = "Summary",
    path: str = SUMMARY_PATH,
    components: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a V2 summary page. Summary pages never carry ``next``."""
    return {
        "id": id or new_id(),
        "title": title,
        "path": path,
        "controller": ControllerType.SUMMARY.value,
        "components": list(components or []),
    }


def empty_definition(name: str) -> dict[str, Any]:
    """The draft a new form starts with: a V2 document with only a summary page."""
    return {
        "name": name,
        "engine": Engine.V2.value,
        "schema": SchemaVersion.V2.value,
        "startPage": SUMMARY_PATH,
        "pages": [build_summary_page()],
        "conditions": [],
        "sections": [],
        "lists": [],
    }


def assign_component_ids(components: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Give components without an id a fresh one; names must be unique on the page."""
    seen: set[str] = set()
    result = []
    for component in components:
        name = component.get("name")
        if name in seen:
            raise ConflictError(f"Duplicate component name {name}")
        seen.add(name)
        result.append(component if component.get("id") else {**component, "id": new_id()})
    return result


def link_target(link: Any) -> str | None:
    """The ``path`` of a ``next`` entry, or None when the entry is not a link object."""
    return link.get("path") if isinstance(link, dict) else None

"""Section assignment."""

from typing import Any

from forms_api.services.definition.builders import new_id
from forms_api.services.definition.models import SectionRequestType


def assign_sections(
    definition: dict[str, Any],
    sections: list[dict[str, Any]],
    request_type: SectionRequestType,
) -> list[dict[str, Any]]:
    """Create/update or remove sections by name and return the resulting list.

    CREATE_SECTION upserts each incoming section by name. DELETE_SECTION
    removes the named sections, or every section when none are named.
    """
    current = definition.setdefault("sections", [])

    if request_type == SectionRequestType.DELETE_SECTION:
        names = {section["name"] for section in sections}
        definition["sections"] = [s for s in current if names and s.get("name") not in names]
        return definition["sections"]

    by_name = {section.get("name"): section for section in current}
    for incoming in sections:
        existing = by_name.get(incoming["name"])
        if existing is not None:
            existing.update({k: v for k, v in incoming.items() if k != "id"})
            existing.setdefault("id", new_id())
        else:
            created = {**incoming, "id": new_id()}
            created.setdefault("pageIds", [])
            current.append(created)
            by_name[created["name"]] = created
    return current

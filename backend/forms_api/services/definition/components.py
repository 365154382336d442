"""Component edits, scoped to a single page."""

from typing import Any

from forms_api.services.definition.builders import new_id
from forms_api.services.definition.pages import find_page
from forms_api.services.exceptions import ConflictError, InvalidInputError, NotFoundError


def _component_index(page: dict[str, Any], component_id: str) -> int:
    for index, component in enumerate(page.get("components") or []):
        if component.get("id") == component_id:
            return index
    raise NotFoundError(f"Component {component_id} not found on page {page.get('id')}")


def _ensure_name_free(page: dict[str, Any], name: str, *, ignore_id: str | None = None) -> None:
    for component in page.get("components") or []:
        if component.get("name") == name and component.get("id") != ignore_id:
            raise ConflictError(f"Component with name {name} already exists on page {page.get('id')}")


def create_component(
    definition: dict[str, Any],
    page_id: str,
    component: dict[str, Any],
    *,
    prepend: bool = False,
) -> dict[str, Any]:
    page = find_page(definition, page_id)
    _ensure_name_free(page, component["name"])

    created = {**component, "id": new_id()}
    components = page.setdefault("components", [])
    if prepend:
        components.insert(0, created)
    else:
        components.append(created)
    return created


def update_component(
    definition: dict[str, Any],
    page_id: str,
    component_id: str,
    component: dict[str, Any],
) -> dict[str, Any]:
    """Replace a component wholesale, keeping its id."""
    if component.get("id") not in (None, component_id):
        raise InvalidInputError(f"Component id {component.get('id')} does not match {component_id}")

    page = find_page(definition, page_id)
    index = _component_index(page, component_id)
    _ensure_name_free(page, component["name"], ignore_id=component_id)

    updated = {**component, "id": component_id}
    page["components"][index] = updated
    return updated


def delete_component(definition: dict[str, Any], page_id: str, component_id: str) -> None:
    # List references held by other components are left for publish-time validation
    page = find_page(definition, page_id)
    index = _component_index(page, component_id)
    del page["components"][index]

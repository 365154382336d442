"""List edits. List names are unique across the whole definition."""

from typing import Any

from forms_api.services.definition.builders import new_id
from forms_api.services.exceptions import ConflictError, InvalidInputError, NotFoundError


def _list_index(definition: dict[str, Any], list_id: str) -> int:
    for index, lst in enumerate(definition.get("lists") or []):
        if lst.get("id") == list_id:
            return index
    raise NotFoundError(f"List {list_id} not found")


def _ensure_name_free(definition: dict[str, Any], name: str, *, ignore_id: str | None = None) -> None:
    for lst in definition.get("lists") or []:
        if lst.get("name") == name and lst.get("id") != ignore_id:
            raise ConflictError(f"List with name {name} already exists")


def create_list(definition: dict[str, Any], lst: dict[str, Any]) -> dict[str, Any]:
    _ensure_name_free(definition, lst["name"])
    created = {**lst, "id": new_id()}
    definition.setdefault("lists", []).append(created)
    return created


def update_list(definition: dict[str, Any], list_id: str, lst: dict[str, Any]) -> dict[str, Any]:
    if lst.get("id") not in (None, list_id):
        raise InvalidInputError(f"List id {lst.get('id')} does not match {list_id}")

    index = _list_index(definition, list_id)
    _ensure_name_free(definition, lst["name"], ignore_id=list_id)

    updated = {**lst, "id": list_id}
    definition["lists"][index] = updated
    return updated


def delete_list(definition: dict[str, Any], list_id: str) -> None:
    index = _list_index(definition, list_id)
    del definition["lists"][index]

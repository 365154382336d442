"""Page edits on a definition document."""

from typing import Any

from forms_api.services.definition.builders import assign_component_ids, link_target, new_id
from forms_api.services.definition.models import END_PAGE_CONTROLLERS
from forms_api.services.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    StructuralInvalidError,
)


def _links(page: dict[str, Any]) -> list[Any]:
    links = page.get("next")
    return links if isinstance(links, list) else []


def find_page(definition: dict[str, Any], page_id: str) -> dict[str, Any]:
    for page in definition.get("pages") or []:
        if page.get("id") == page_id:
            return page
    raise NotFoundError(f"Page {page_id} not found")


def _ensure_path_free(definition: dict[str, Any], path: str, *, ignore: dict | None = None) -> None:
    for page in definition.get("pages") or []:
        if page is not ignore and page.get("path") == path:
            raise ConflictError(f"Page with path {path} already exists")


def _default_position(pages: list[dict[str, Any]]) -> int:
    for index, page in enumerate(pages):
        if page.get("controller") in END_PAGE_CONTROLLERS:
            return index
    return len(pages)


def create_page(
    definition: dict[str, Any],
    page: dict[str, Any],
    *,
    position: int | None = None,
) -> dict[str, Any]:
    """Add a page and return it with its generated id.

    Without an explicit ``position`` the page goes before the first summary
    or status page, so the journey still ends there.
    """
    pages = definition.setdefault("pages", [])
    _ensure_path_free(definition, page["path"])

    created = {**page, "id": new_id()}
    created["components"] = assign_component_ids(created.get("components") or [])
    if created.get("controller") not in END_PAGE_CONTROLLERS:
        created.setdefault("next", [])

    if position is None:
        position = _default_position(pages)
    pages.insert(max(0, min(position, len(pages))), created)

    if not definition.get("startPage"):
        definition["startPage"] = created["path"]
    return created


def update_page(definition: dict[str, Any], page_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    """Merge ``fields`` onto a page; a path change is carried to every link to it."""
    for name in ("title", "path"):
        if name in fields and fields[name] is None:
            raise InvalidInputError(f"Page {name} cannot be null")

    page = find_page(definition, page_id)
    old_path = page.get("path")
    new_path = fields.get("path", old_path)

    if new_path != old_path:
        _ensure_path_free(definition, new_path, ignore=page)
        if definition.get("startPage") == old_path:
            definition["startPage"] = new_path
        for other in definition.get("pages") or []:
            for link in _links(other):
                if link_target(link) == old_path:
                    link["path"] = new_path

    page.update(fields)
    return page


def delete_page(definition: dict[str, Any], page_id: str) -> None:
    page = find_page(definition, page_id)
    path = page.get("path")
    if definition.get("startPage") == path:
        raise StructuralInvalidError(f"Page {page_id} is the start page and cannot be deleted")

    definition["pages"] = [p for p in definition["pages"] if p is not page]

    for other in definition["pages"]:
        if isinstance(other.get("next"), list):
            other["next"] = [link for link in other["next"] if link_target(link) != path]

    for section in definition.get("sections") or []:
        if "pageIds" in section:
            section["pageIds"] = [pid for pid in section["pageIds"] if pid != page_id]


def reorder_pages(definition: dict[str, Any], order: list[str]) -> dict[str, Any]:
    """Put pages in the order given by ``order``, which must name every page exactly once."""
    pages = definition.get("pages") or []
    by_id = {page.get("id"): page for page in pages}
    if None in by_id:
        raise InvalidInputError("Every page needs an id before pages can be reordered")

    if len(order) != len(set(order)):
        raise InvalidInputError("Page order contains duplicate ids")

    missing = set(by_id) - set(order)
    unknown = set(order) - set(by_id)
    if missing or unknown:
        details = []
        if missing:
            details.append(f"missing {sorted(missing)}")
        if unknown:
            details.append(f"unknown {sorted(unknown)}")
        raise InvalidInputError(f"Page order must list every page exactly once ({', '.join(details)})")

    definition["pages"] = [by_id[page_id] for page_id in order]
    return definition

"""Structural validation of definition documents.

Each check returns a list of human-readable problems rather than raising, so
callers can report everything wrong with a document at once.
"""

from collections import Counter
from typing import Any

from forms_api.services.definition.builders import link_target
from forms_api.services.exceptions import StructuralInvalidError


def _duplicates(values: list[Any]) -> list[Any]:
    return [value for value, count in Counter(values).items() if count > 1]


def find_uniqueness_errors(definition: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    pages = definition.get("pages") or []

    for path in _duplicates([page.get("path") for page in pages]):
        errors.append(f"Duplicate page path '{path}'")

    page_ids = [page["id"] for page in pages if page.get("id")]
    for page_id in _duplicates(page_ids):
        errors.append(f"Duplicate page id '{page_id}'")

    for page in pages:
        names = [c.get("name") for c in page.get("components") or []]
        for name in _duplicates(names):
            errors.append(f"Duplicate component name '{name}' on page '{page.get('path')}'")

    lists = definition.get("lists") or []
    for name in _duplicates([lst.get("name") for lst in lists]):
        errors.append(f"Duplicate list name '{name}'")

    sections = definition.get("sections") or []
    for name in _duplicates([section.get("name") for section in sections]):
        errors.append(f"Duplicate section name '{name}'")

    return errors


def find_navigation_errors(definition: dict[str, Any]) -> list[str]:
    """Report ``next`` transitions that target a path no page has."""
    pages = definition.get("pages") or []
    paths = {page.get("path") for page in pages}
    errors: list[str] = []
    for page in pages:
        links = page.get("next") or []
        if not isinstance(links, list):
            errors.append(f"Page '{page.get('path')}' has a malformed next list")
            continue
        for link in links:
            target = link_target(link)
            if not isinstance(target, str):
                errors.append(f"Page '{page.get('path')}' has a malformed next link {link!r}")
            elif target not in paths:
                errors.append(f"Page '{page.get('path')}' links to unknown page '{target}'")
    return errors


def find_reference_errors(definition: dict[str, Any]) -> list[str]:
    pages = definition.get("pages") or []
    errors = find_navigation_errors(definition)

    start_page = definition.get("startPage")
    if pages and start_page and start_page not in {page.get("path") for page in pages}:
        errors.append(f"Start page '{start_page}' does not exist")

    # V1 components refer to lists by name, V2 by id
    list_refs = set()
    for lst in definition.get("lists") or []:
        list_refs.add(lst.get("id"))
        list_refs.add(lst.get("name"))
    list_refs.discard(None)

    for page in pages:
        for component in page.get("components") or []:
            ref = component.get("list")
            if ref and ref not in list_refs:
                errors.append(
                    f"Component '{component.get('name')}' on page '{page.get('path')}' "
                    f"references unknown list '{ref}'"
                )

    page_ids = {page.get("id") for page in pages}
    for section in definition.get("sections") or []:
        for page_id in section.get("pageIds") or []:
            if page_id not in page_ids:
                errors.append(f"Section '{section.get('name')}' references unknown page '{page_id}'")

    return errors


def validate_definition(definition: dict[str, Any], *, check_references: bool = True) -> list[str]:
    """Validate a definition document, return list of errors."""
    errors = find_uniqueness_errors(definition)
    if check_references:
        errors.extend(find_reference_errors(definition))
    return errors


def ensure_valid(definition: dict[str, Any], message: str, *, check_references: bool = True) -> None:
    errors = validate_definition(definition, check_references=check_references)
    if errors:
        raise StructuralInvalidError(message, errors)

"""Definition-level boolean options such as ``showReferenceNumber``."""

from typing import Any

from forms_api.services.definition.models import BOOLEAN_OPTIONS
from forms_api.services.exceptions import InvalidInputError

_BOOLEAN_VALUES = {"true": True, "false": False}


def set_option(definition: dict[str, Any], name: str, value: str) -> bool:
    """Store a string-encoded boolean under ``options[name]`` and return the typed value."""
    if name not in BOOLEAN_OPTIONS:
        raise InvalidInputError(f"Unknown option {name}")

    typed = _BOOLEAN_VALUES.get(value.strip().lower())
    if typed is None:
        raise InvalidInputError(f"Option {name} must be 'true' or 'false', got '{value}'")

    definition.setdefault("options", {})[name] = typed
    return typed

"""Form definition engine: document edits, validation and V1 -> V2 migration."""

from forms_api.services.definition.builders import build_summary_page, empty_definition, new_id
from forms_api.services.definition.components import (
    create_component,
    delete_component,
    update_component,
)
from forms_api.services.definition.lists import create_list, delete_list, update_list
from forms_api.services.definition.migration import is_v2, migrate_to_v2
from forms_api.services.definition.models import (
    ComponentType,
    ControllerType,
    DefinitionState,
    Engine,
    SchemaVersion,
    SectionRequestType,
)
from forms_api.services.definition.options import set_option
from forms_api.services.definition.pages import (
    create_page,
    delete_page,
    find_page,
    reorder_pages,
    update_page,
)
from forms_api.services.definition.sections import assign_sections
from forms_api.services.definition.validation import ensure_valid, validate_definition

__all__ = [
    "ComponentType",
    "ControllerType",
    "DefinitionState",
    "Engine",
    "SchemaVersion",
    "SectionRequestType",
    "assign_sections",
    "build_summary_page",
    "create_component",
    "create_list",
    "create_page",
    "delete_component",
    "delete_list",
    "delete_page",
    "empty_definition",
    "ensure_valid",
    "find_page",
    "is_v2",
    "migrate_to_v2",
    "new_id",
    "reorder_pages",
    "set_option",
    "update_component",
    "update_list",
    "update_page",
    "validate_definition",
]

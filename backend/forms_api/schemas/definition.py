"""Request and response schemas for definition documents and their parts.

Definition documents are free-form JSON beyond the fields checked here, so
every model allows extra keys and is dumped back to a plain dict (camelCase,
as stored) before it reaches the definition engine.
"""

import uuid
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from forms_api.services.definition import ComponentType, ControllerType, Engine, SectionRequestType

_PATH_PATTERN = r"^/\S*$"
_NAME_PATTERN = r"^[A-Za-z][A-Za-z0-9_]*$"


class DocumentModel(BaseModel):
    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    def to_document(self, **kwargs: Any) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, **kwargs)


# ---------------------------------------------------------------------------
# Components and pages
# ---------------------------------------------------------------------------


class ComponentInput(DocumentModel):
    id: str | None = None
    type: ComponentType
    name: str = Field(..., pattern=_NAME_PATTERN, max_length=100)
    title: str = ""
    hint: str | None = None
    list: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")


class NextLink(DocumentModel):
    path: str = Field(..., pattern=_PATH_PATTERN)
    condition: str | None = None


class PageInput(DocumentModel):
    title: str = Field(..., max_length=250)
    path: str = Field(..., pattern=_PATH_PATTERN, max_length=250)
    controller: ControllerType | None = None
    section: str | None = None
    components: list[ComponentInput] = Field(default_factory=list)
    next: list[NextLink] | None = None


class PagePatch(DocumentModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    title: str | None = Field(None, max_length=250)
    path: str | None = Field(None, pattern=_PATH_PATTERN, max_length=250)
    controller: ControllerType | None = None
    section: str | None = None
    next: list[NextLink] | None = None

    @model_validator(mode="after")
    def _no_null_title_or_path(self) -> "PagePatch":
        cleared = [name for name in ("title", "path") if name in self.model_fields_set and getattr(self, name) is None]
        if cleared:
            raise ValueError(f"Page {' and '.join(cleared)} cannot be null")
        return self

    def to_document(self, **kwargs: Any) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, **kwargs)


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


class ListItem(DocumentModel):
    text: str = Field(..., min_length=1)
    value: str | int | float | bool


class ListInput(DocumentModel):
    id: str | None = None
    title: str = Field(..., min_length=1, max_length=250)
    name: str = Field(..., min_length=1, max_length=100)
    type: Literal["string", "number"]
    items: list[ListItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def _values_match_type(self) -> "ListInput":
        for item in self.items:
            is_number = isinstance(item.value, (int, float)) and not isinstance(item.value, bool)
            if self.type == "number" and not is_number:
                raise ValueError(f"List item '{item.text}' must have a numeric value")
            if self.type == "string" and not isinstance(item.value, str):
                raise ValueError(f"List item '{item.text}' must have a string value")
        return self


# ---------------------------------------------------------------------------
# Sections and options
# ---------------------------------------------------------------------------


class SectionInput(DocumentModel):
    id: str | None = None
    name: str = Field(..., min_length=1, max_length=100)
    title: str | None = Field(None, min_length=1, max_length=250)
    hide_title: bool | None = None
    page_ids: list[str] = Field(default_factory=list)


class SectionAssignment(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sections: list[SectionInput]
    request_type: SectionRequestType

    @model_validator(mode="after")
    def _titles_for_create(self) -> "SectionAssignment":
        if self.request_type == SectionRequestType.CREATE_SECTION:
            untitled = [s.name for s in self.sections if not s.title]
            if untitled:
                raise ValueError(f"Sections need a title: {', '.join(untitled)}")
        return self


class OptionInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    option_value: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ItemStatusResponse(BaseModel):
    id: str
    status: str


class SectionsResponse(BaseModel):
    id: uuid.UUID
    sections: list[dict[str, Any]]
    status: str


class OptionResponse(BaseModel):
    option: dict[str, bool]


# ---------------------------------------------------------------------------
# Whole documents
# ---------------------------------------------------------------------------


class PageDocument(DocumentModel):
    """A page as found in a stored document; V1 pages may lack ids and use legacy controllers."""

    id: str | None = None
    title: str = ""
    path: str = Field(..., pattern=_PATH_PATTERN)
    controller: str | None = None
    components: list[ComponentInput] = Field(default_factory=list)
    next: list[NextLink] | None = None


class FormDefinitionDocument(DocumentModel):
    name: str = ""
    engine: Engine = Engine.V1
    schema_: Literal[1, 2] = Field(1, alias="schema")
    start_page: str | None = None
    pages: list[PageDocument] = Field(default_factory=list)
    conditions: list[dict[str, Any]] = Field(default_factory=list)
    sections: list[SectionInput] = Field(default_factory=list)
    lists: list[ListInput] = Field(default_factory=list)
    options: dict[str, bool] | None = None

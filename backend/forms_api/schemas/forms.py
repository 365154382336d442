import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from forms_api.schemas.auth import Author

FormStatus = Literal["draft", "live"]

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)
_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# ---------------------------------------------------------------------------
# Form metadata request schemas
# ---------------------------------------------------------------------------


class FormMetadataInput(BaseModel):
    model_config = _CAMEL

    title: str = Field(..., min_length=1, max_length=250)
    organisation: str = Field(..., min_length=1, max_length=255)
    team_name: str = Field(..., min_length=1, max_length=255)
    team_email: str = Field(..., pattern=_EMAIL_PATTERN, max_length=255)


class FormMetadataUpdate(BaseModel):
    model_config = _CAMEL

    title: str | None = Field(None, min_length=1, max_length=250)
    organisation: str | None = Field(None, min_length=1, max_length=255)
    team_name: str | None = Field(None, min_length=1, max_length=255)
    team_email: str | None = Field(None, pattern=_EMAIL_PATTERN, max_length=255)
    contact: dict[str, Any] | None = None
    submission_guidance: str | None = None
    privacy_notice_url: str | None = Field(None, max_length=500)
    notification_email: str | None = Field(None, pattern=_EMAIL_PATTERN, max_length=255)


# ---------------------------------------------------------------------------
# Form metadata response schemas
# ---------------------------------------------------------------------------


class AuditStamp(BaseModel):
    model_config = _CAMEL

    created_at: datetime
    created_by: Author
    updated_at: datetime
    updated_by: Author


class FormMetadataResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: uuid.UUID
    slug: str
    title: str
    organisation: str
    team_name: str
    team_email: str
    contact: dict[str, Any] | None = None
    submission_guidance: str | None = None
    privacy_notice_url: str | None = None
    notification_email: str | None = None
    draft: AuditStamp | None = None
    live: AuditStamp | None = None
    created_at: datetime
    created_by: Author
    updated_at: datetime
    updated_by: Author


class Pagination(BaseModel):
    model_config = _CAMEL

    page: int
    per_page: int
    total_items: int
    total_pages: int


class FilterOptions(BaseModel):
    authors: list[str]
    organisations: list[str]
    status: list[FormStatus]


class FormListMeta(BaseModel):
    pagination: Pagination
    filters: FilterOptions


class FormListResponse(BaseModel):
    data: list[FormMetadataResponse]
    meta: FormListMeta


class FormSlugsResponse(BaseModel):
    slugs: list[str]


class FormStatusResponse(BaseModel):
    id: uuid.UUID
    slug: str | None = None
    status: str

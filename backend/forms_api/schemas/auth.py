from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ServiceIdentity(BaseModel):
    """Identity claims carried by a verified service token."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    service_id: str
    service_name: str


class Author(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: Author
    scope: tuple[str, ...]


class AuthResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    credentials: Credentials | None = None

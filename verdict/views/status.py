"""Schema for the upstream connectivity check."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ApiStatusResponse(BaseModel):
    has_access: bool = Field(
        ...,
        validation_alias=AliasChoices("hasAccess", "has_access"),
        serialization_alias="hasAccess",
    )
    message: str

    model_config = ConfigDict(populate_by_name=True)

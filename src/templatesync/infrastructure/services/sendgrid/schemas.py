"""Pydantic schemas for the SendGrid template API.

Defines request bodies built from domain specs and response models that are
converted back into domain state.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from templatesync.domain.entities import (
    TemplateState,
    VersionSpec,
    VersionState,
)


class TemplateNameRequest(BaseModel):
    """Request body for creating or renaming a template.

    Attributes:
        name: Template name.
    """

    name: str = Field(min_length=1)


class VersionRequest(BaseModel):
    """Request body for creating or updating a template version.

    Unset content is sent as an empty string and an unset active flag as 0.
    """

    name: str
    subject: str
    html_content: str = ""
    plain_content: str = ""
    active: NonNegativeInt = 0
    template_id: str

    @classmethod
    def from_spec(cls, spec: VersionSpec, template_id: str) -> "VersionRequest":
        return cls(
            name=spec.name,
            subject=spec.subject,
            html_content=spec.html_content or "",
            plain_content=spec.plain_content or "",
            active=spec.active or 0,
            template_id=template_id,
        )


class VersionResponse(BaseModel):
    """Version as returned by the API.

    The API returns null for content it has not generated yet, so nulls are
    normalized to the field defaults.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    subject: str = ""
    html_content: str = ""
    plain_content: str = ""
    active: int = 0
    editor: str = ""
    generate_plain_content: bool = False
    template_id: str = ""
    thumbnail_url: str = ""

    @field_validator(
        "name",
        "subject",
        "html_content",
        "plain_content",
        "editor",
        "template_id",
        "thumbnail_url",
        mode="before",
    )
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("active", mode="before")
    @classmethod
    def null_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    def to_state(self) -> VersionState:
        return VersionState(**self.model_dump())


class TemplateResponse(BaseModel):
    """Template as returned by the API."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    versions: list[VersionResponse] = Field(default_factory=list)

    @field_validator("versions", mode="before")
    @classmethod
    def null_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_state(self) -> TemplateState:
        return TemplateState(
            id=self.id,
            name=self.name,
            versions=[version.to_state() for version in self.versions],
        )

"""Pydantic schemas for desired-state documents and state output.

A desired-state document is the JSON file the CLI reads::

    {
        "name": "welcome",
        "versions": [
            {"name": "v1", "subject": "Hello", "html_content": "<p>Hi</p>", "active": 1}
        ]
    }
"""

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from templatesync.domain.entities import (
    MAX_VERSIONS,
    DeleteResult,
    TemplateSpec,
    TemplateState,
    VersionSpec,
)


class VersionDocument(BaseModel):
    """One version entry of a desired-state document."""

    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    name: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    html_content: str | None = None
    plain_content: str | None = None
    active: NonNegativeInt | None = None

    def to_spec(self) -> VersionSpec:
        return VersionSpec(**self.model_dump())


class TemplateDocument(BaseModel):
    """A desired-state document.

    Attributes:
        name: Template name.
        versions: Ordered versions (0 to 300 entries).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    versions: list[VersionDocument] = Field(default_factory=list, max_length=MAX_VERSIONS)

    def to_spec(self) -> TemplateSpec:
        return TemplateSpec(
            name=self.name,
            versions=[version.to_spec() for version in self.versions],
        )


class VersionStateResponse(BaseModel):
    """Version state as printed by the CLI."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    subject: str
    html_content: str
    plain_content: str
    active: int
    editor: str
    generate_plain_content: bool
    template_id: str
    thumbnail_url: str


class TemplateStateResponse(BaseModel):
    """Template state as printed by the CLI."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    versions: list[VersionStateResponse]

    @classmethod
    def from_state(cls, state: TemplateState) -> "TemplateStateResponse":
        return cls.model_validate(state)


class DeleteResultResponse(BaseModel):
    """Delete outcome as printed by the CLI."""

    id: str
    outcome: str
    error: str | None = None

    @classmethod
    def from_result(cls, result: DeleteResult) -> "DeleteResultResponse":
        return cls(
            id=result.template_id,
            outcome=result.outcome.value,
            error=str(result.error) if result.error is not None else None,
        )

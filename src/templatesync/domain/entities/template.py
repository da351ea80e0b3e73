"""Template entities for desired and remote email template state.

A template is a named container of content versions. Specs describe what the
caller wants; states describe what the API reports.
"""

from dataclasses import dataclass, field
from enum import Enum

MAX_VERSIONS = 300


@dataclass(frozen=True)
class VersionSpec:
    """Desired content of a single template version.

    Attributes:
        name: Version name (required).
        subject: Email subject line (required).
        id: Remote version ID, or None when the version does not exist yet.
        html_content: HTML body.
        plain_content: Plain text body.
        active: Active flag as sent to the API (0 or 1).
    """

    name: str
    subject: str
    id: str | None = None
    html_content: str | None = None
    plain_content: str | None = None
    active: int | None = None

    def __post_init__(self) -> None:
        """Validate version data after initialization."""
        if not self.name:
            raise ValueError("Version name is required")
        if not self.subject:
            raise ValueError("Version subject is required")
        if self.active is not None and self.active < 0:
            raise ValueError("Version active flag must be a non-negative integer")


@dataclass(frozen=True)
class TemplateSpec:
    """Desired state of a template.

    Attributes:
        name: Template name (required).
        versions: Ordered versions, at most MAX_VERSIONS.
    """

    name: str
    versions: list[VersionSpec] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate template data after initialization."""
        if not self.name:
            raise ValueError("Template name is required")
        if len(self.versions) > MAX_VERSIONS:
            raise ValueError(
                f"A template holds at most {MAX_VERSIONS} versions, got {len(self.versions)}"
            )


@dataclass
class VersionState:
    """A template version as reported by the API."""

    id: str
    name: str
    subject: str
    html_content: str = ""
    plain_content: str = ""
    active: int = 0
    editor: str = ""
    generate_plain_content: bool = False
    template_id: str = ""
    thumbnail_url: str = ""


@dataclass
class TemplateState:
    """A template as reported by the API.

    The id is assigned once at creation and never changes.
    """

    id: str
    name: str
    versions: list[VersionState] = field(default_factory=list)


@dataclass(frozen=True)
class TemplateChanges:
    """Which top-level template fields differ from the remote state."""

    name: bool = False
    versions: bool = False

    @property
    def any(self) -> bool:
        return self.name or self.versions


class DeleteOutcome(str, Enum):
    """Result of a delete call."""

    DELETED = "deleted"
    ALREADY_ABSENT = "already_absent"
    FAILED = "failed"


@dataclass(frozen=True)
class DeleteResult:
    """Typed delete result.

    ``FAILED`` is only returned when the reconciler is configured to report
    delete failures instead of raising them; ``error`` then holds the cause.
    """

    template_id: str
    outcome: DeleteOutcome
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is not DeleteOutcome.FAILED


@dataclass(frozen=True)
class ImportedTemplateId:
    """Parts of a composite ``id:name:versions`` template identity."""

    template_id: str
    name: str

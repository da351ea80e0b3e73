"""Domain entities for TemplateSync.

Entities are pure Python dataclasses that represent core concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from templatesync.domain.entities.template import (
    MAX_VERSIONS,
    DeleteOutcome,
    DeleteResult,
    ImportedTemplateId,
    TemplateChanges,
    TemplateSpec,
    TemplateState,
    VersionSpec,
    VersionState,
)

__all__ = [
    "MAX_VERSIONS",
    "DeleteOutcome",
    "DeleteResult",
    "ImportedTemplateId",
    "TemplateChanges",
    "TemplateSpec",
    "TemplateState",
    "VersionSpec",
    "VersionState",
]

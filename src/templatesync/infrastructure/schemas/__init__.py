"""Pydantic schemas for files read and written by the CLI."""

from templatesync.infrastructure.schemas.desired_state_schemas import (
    DeleteResultResponse,
    TemplateDocument,
    TemplateStateResponse,
    VersionDocument,
    VersionStateResponse,
)

__all__ = [
    "DeleteResultResponse",
    "TemplateDocument",
    "TemplateStateResponse",
    "VersionDocument",
    "VersionStateResponse",
]

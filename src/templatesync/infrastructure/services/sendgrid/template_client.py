"""Client for the SendGrid transactional template endpoints.

Each method maps to exactly one API call. Errors are wrapped with the
operation that failed and propagated; only a 404 on read is turned into a
``None`` result.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from templatesync.core.exceptions import (
    RateLimitedError,
    ResponseDecodeError,
    TemplateApiError,
    TemplateSyncError,
)
from templatesync.domain.entities import (
    DeleteOutcome,
    TemplateState,
    VersionSpec,
    VersionState,
)
from templatesync.infrastructure.ratelimit import RateLimits
from templatesync.infrastructure.services.sendgrid.schemas import (
    TemplateNameRequest,
    TemplateResponse,
    VersionRequest,
    VersionResponse,
)
from templatesync.infrastructure.services.sendgrid.transport import SendGridTransport

_ModelT = type[BaseModel]


def _decode(response: httpx.Response, model: _ModelT, what: str) -> Any:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        raise ResponseDecodeError(f"failed to unmarshal {what}: {e}") from e


@contextmanager
def _api_call(message: str) -> Iterator[None]:
    try:
        yield
    except RateLimitedError:
        # Kept as-is so pollers can tell rate limiting apart
        raise
    except TemplateSyncError as e:
        raise TemplateApiError(message, cause=e) from e


class TemplateApiClient:
    """Typed access to /templates and /templates/{id}/versions."""

    def __init__(
        self,
        transport: SendGridTransport,
        rate_limits: RateLimits,
        *,
        version_retries: int = 5,
        delete_retries: int = 5,
    ) -> None:
        """Initialize the client.

        Args:
            transport: HTTP transport.
            rate_limits: Process-scoped limiters for create and delete calls.
            version_retries: Attempts allowed for rate-limited version writes.
            delete_retries: Attempts allowed for rate-limited deletes.
        """
        self.transport = transport
        self.rate_limits = rate_limits
        self.version_retries = version_retries
        self.delete_retries = delete_retries

    async def create_template(self, name: str) -> TemplateState:
        """POST /templates, expecting 201."""
        body = TemplateNameRequest(name=name).model_dump()
        with _api_call("failed to create template"):
            response = await self.transport.request(
                "POST",
                "/templates",
                json=body,
                expected_statuses=(201,),
                rate_limiter=self.rate_limits.create,
            )

        template = _decode(response, TemplateResponse, "created template ID")
        return template.to_state()

    async def get_template(self, template_id: str) -> TemplateState | None:
        """GET /templates/{id}.

        Returns:
            The template state, or None when the API answers 404.
        """
        with _api_call("failed to query API template"):
            response = await self.transport.request(
                "GET",
                f"/templates/{template_id}",
                expected_statuses=(200, 404),
            )

        if response.status_code == 404:
            return None

        template = _decode(response, TemplateResponse, "template query response")
        return template.to_state()

    async def rename_template(self, template_id: str, name: str) -> None:
        """PATCH /templates/{id}, expecting 200."""
        body = TemplateNameRequest(name=name).model_dump()
        with _api_call("failed to rename template"):
            await self.transport.request(
                "PATCH",
                f"/templates/{template_id}",
                json=body,
                expected_statuses=(200,),
                rate_limiter=self.rate_limits.create,
            )

    async def delete_template(self, template_id: str) -> DeleteOutcome:
        """DELETE /templates/{id}, expecting 204.

        Returns:
            DELETED on 204, ALREADY_ABSENT on 404.
        """
        with _api_call("failed to delete template"):
            response = await self.transport.request(
                "DELETE",
                f"/templates/{template_id}",
                expected_statuses=(204, 404),
                rate_limiter=self.rate_limits.delete,
                retries=self.delete_retries,
            )

        if response.status_code == 404:
            return DeleteOutcome.ALREADY_ABSENT
        return DeleteOutcome.DELETED

    async def create_version(self, template_id: str, version: VersionSpec) -> VersionState:
        """POST /templates/{id}/versions, expecting 201."""
        body = VersionRequest.from_spec(version, template_id).model_dump()
        with _api_call("failed to create template versions"):
            response = await self.transport.request(
                "POST",
                f"/templates/{template_id}/versions",
                json=body,
                expected_statuses=(201,),
                rate_limiter=self.rate_limits.delete,
                retries=self.version_retries,
            )

        created = _decode(response, VersionResponse, "created template version")
        return created.to_state()

    async def update_version(
        self, template_id: str, version_id: str, version: VersionSpec
    ) -> VersionState:
        """PATCH /templates/{id}/versions/{version_id}, expecting 200."""
        body = VersionRequest.from_spec(version, template_id).model_dump()
        with _api_call("failed to update template versions"):
            response = await self.transport.request(
                "PATCH",
                f"/templates/{template_id}/versions/{version_id}",
                json=body,
                expected_statuses=(200,),
                rate_limiter=self.rate_limits.delete,
                retries=self.version_retries,
            )

        updated = _decode(response, VersionResponse, "updated template version")
        return updated.to_state()

"""Template reconciler.

Turns a desired TemplateSpec into the sequence of API calls that make the
remote template match it, and reports remote state back as TemplateState.
All calls of one operation are issued strictly in sequence.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

from templatesync.core.exceptions import (
    CreateTimeoutError,
    PartialCreateError,
    RateLimitedError,
    TemplateNotFoundError,
    TemplateSyncError,
    WaitTimeoutError,
)
from templatesync.core.logging import LoggingContext, get_logger
from templatesync.domain.entities import (
    DeleteOutcome,
    DeleteResult,
    TemplateChanges,
    TemplateSpec,
    TemplateState,
    VersionSpec,
)
from templatesync.domain.services import (
    STATUS_DONE,
    STATUS_WAITING,
    StateWaiter,
    detect_changes,
    parse_template_id,
)
from templatesync.infrastructure.services.sendgrid import TemplateApiClient

logger = get_logger(__name__)


class TemplateReconciler:
    """Lifecycle operations for one template resource.

    Attributes:
        client: Template API client.
        poll_interval: Seconds between visibility polls after create.
        create_timeout: Seconds allowed for a created template to become visible.
        continuous_target_occurrence: Consecutive successful reads required.
        strict_delete: Raise delete failures instead of reporting them.
    """

    def __init__(
        self,
        client: TemplateApiClient,
        *,
        poll_interval: float = 2.0,
        create_timeout: float = 1200.0,
        continuous_target_occurrence: int = 3,
        strict_delete: bool = False,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.poll_interval = poll_interval
        self.create_timeout = create_timeout
        self.continuous_target_occurrence = continuous_target_occurrence
        self.strict_delete = strict_delete
        self._clock = clock
        self._sleep = sleep

    async def create(
        self,
        spec: TemplateSpec,
        on_created: Callable[[str], None] | None = None,
    ) -> TemplateState:
        """Create a template and its versions, then wait for it to be visible.

        The new template ID is handed to ``on_created`` as soon as the API
        assigns it, before any version is created. Failures after that point
        raise PartialCreateError carrying the ID.

        Args:
            spec: Desired template.
            on_created: Optional callback receiving the new template ID.

        Returns:
            The template state read after it became visible.

        Raises:
            TemplateApiError: If the template itself could not be created.
            PartialCreateError: If a later step failed.
            CreateTimeoutError: If the template never became visible.
        """
        created = await self.client.create_template(spec.name)
        template_id = created.id

        with LoggingContext(template_id=template_id):
            logger.info("Template created", name=spec.name, versions=len(spec.versions))
            if on_created is not None:
                on_created(template_id)

            for index, version in enumerate(spec.versions):
                try:
                    remote = await self.client.create_version(template_id, version)
                except TemplateSyncError as e:
                    raise PartialCreateError(
                        template_id, f"version {index} ({version.name}) failed: {e}"
                    ) from e
                logger.info("Template version created", version_id=remote.id, name=version.name)

            await self._wait_until_visible(template_id)

            try:
                state = await self.read(template_id)
            except TemplateSyncError as e:
                raise PartialCreateError(template_id, f"reading it failed: {e}") from e
            if state is None:
                raise PartialCreateError(template_id, "it disappeared after becoming visible")
            return state

    async def _wait_until_visible(self, template_id: str) -> None:
        async def refresh() -> tuple[Any, str]:
            try:
                template = await self.client.get_template(template_id)
            except RateLimitedError as e:
                # The advertised reset may exceed the create timeout
                wait_seconds = min(e.retry_after, waiter.remaining())
                logger.info(
                    "Visibility poll rate limited",
                    retry_after=e.retry_after,
                    wait_seconds=wait_seconds,
                )
                await self._sleep(wait_seconds)
                return None, STATUS_WAITING

            if template is None:
                return None, STATUS_WAITING
            return template, STATUS_DONE

        waiter = StateWaiter(
            refresh,
            pending=[STATUS_WAITING],
            target=[STATUS_DONE],
            timeout=self.create_timeout,
            interval=self.poll_interval,
            delay=self.poll_interval,
            continuous_target_occurrence=self.continuous_target_occurrence,
            clock=self._clock,
            sleep=self._sleep,
        )

        try:
            await waiter.wait()
        except WaitTimeoutError as e:
            raise CreateTimeoutError(template_id, self.create_timeout) from e
        except TemplateSyncError as e:
            raise PartialCreateError(template_id, f"waiting for it failed: {e}") from e

        logger.info("Template visible", attempts=waiter.attempts)

    async def read(self, template_id: str) -> TemplateState | None:
        """Read remote state.

        Returns:
            The template state, or None when the template does not exist.
        """
        state = await self.client.get_template(template_id)
        if state is None:
            logger.info("Template not found", template_id=template_id)
        return state

    async def update(
        self,
        template_id: str,
        spec: TemplateSpec,
        changes: TemplateChanges | None = None,
    ) -> TemplateState:
        """Apply a desired spec to an existing template.

        Renames the template when its name changed and pushes every desired
        version when versions changed. Versions with an ID are updated in
        place; versions without one are created. Remote versions that are not
        in the desired list are left alone.

        Args:
            template_id: Remote template ID.
            spec: Desired template.
            changes: Which fields changed. Detected from remote state when omitted.

        Returns:
            The template state read after the update.

        Raises:
            TemplateNotFoundError: If the template does not exist.
            TemplateApiError: If any call fails.
        """
        with LoggingContext(template_id=template_id):
            if changes is None:
                current = await self.read(template_id)
                if current is None:
                    raise TemplateNotFoundError(template_id)
                changes = detect_changes(current, spec)

            if not changes.any:
                logger.info("Template already up to date")

            if changes.name:
                await self.client.rename_template(template_id, spec.name)
                logger.info("Template renamed", name=spec.name)

            if changes.versions:
                for version in spec.versions:
                    await self._upsert_version(template_id, version)

            state = await self.read(template_id)
            if state is None:
                raise TemplateNotFoundError(template_id)
            return state

    async def _upsert_version(self, template_id: str, version: VersionSpec) -> None:
        if version.id:
            await self.client.update_version(template_id, version.id, version)
            logger.info("Template version updated", version_id=version.id, name=version.name)
        else:
            remote = await self.client.create_version(template_id, version)
            logger.info("Template version created", version_id=remote.id, name=version.name)

    async def delete(self, template_id: str) -> DeleteResult:
        """Delete a template.

        A template that is already gone counts as deleted. Other failures are
        reported as a FAILED result unless strict_delete is set, in which case
        they are raised.

        Returns:
            DeleteResult describing the outcome.
        """
        with LoggingContext(template_id=template_id):
            try:
                outcome = await self.client.delete_template(template_id)
            except TemplateSyncError as e:
                if self.strict_delete:
                    raise
                logger.warning("Template delete failed", error=str(e))
                return DeleteResult(template_id, DeleteOutcome.FAILED, e)

            logger.info("Template deleted", outcome=outcome.value)
            return DeleteResult(template_id, outcome)

    async def import_template(self, identifier: str) -> TemplateState:
        """Import a template by its ``id:name:versions`` identity.

        Raises:
            InvalidTemplateIdError: If the identity is malformed.
            TemplateNotFoundError: If the template does not exist.
        """
        imported = parse_template_id(identifier)

        with LoggingContext(template_id=imported.template_id):
            state = await self.read(imported.template_id)
            if state is None:
                raise TemplateNotFoundError(imported.template_id)

            if state.name != imported.name:
                logger.warning(
                    "Imported template name differs from identity",
                    expected=imported.name,
                    actual=state.name,
                )
            return state

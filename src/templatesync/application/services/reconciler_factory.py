"""Wire a TemplateReconciler from settings."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from templatesync.application.services.template_reconciler import TemplateReconciler
from templatesync.core.config import Settings
from templatesync.infrastructure.ratelimit import RateLimits
from templatesync.infrastructure.services.sendgrid import SendGridTransport, TemplateApiClient


@lru_cache
def get_rate_limits(create_seconds: float, delete_seconds: float) -> RateLimits:
    """Get the process-wide limiters for the given intervals.

    Every reconciler built in this process with the same intervals shares
    the same buckets.
    """
    return RateLimits.from_intervals(create_seconds, delete_seconds)


@asynccontextmanager
async def open_reconciler(settings: Settings) -> AsyncIterator[TemplateReconciler]:
    """Build a reconciler and close its HTTP client on exit.

    Example:
        async with open_reconciler(get_settings()) as reconciler:
            state = await reconciler.read("d-123")
    """
    if not settings.api_key:
        raise ValueError("An API key is required (set TEMPLATESYNC_API_KEY)")

    rate_limits = get_rate_limits(
        settings.create_rate_interval_seconds,
        settings.delete_rate_interval_seconds,
    )

    async with SendGridTransport(
        settings.api_key,
        settings.api_base_url,
        timeout=settings.request_timeout_seconds,
        default_retry_after=settings.poll_interval_seconds,
    ) as transport:
        client = TemplateApiClient(
            transport,
            rate_limits,
            version_retries=settings.version_retries,
            delete_retries=settings.delete_retries,
        )
        yield TemplateReconciler(
            client,
            poll_interval=settings.poll_interval_seconds,
            create_timeout=settings.create_timeout_seconds,
            continuous_target_occurrence=settings.continuous_target_occurrence,
            strict_delete=settings.strict_delete,
        )

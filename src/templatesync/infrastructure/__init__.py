"""Infrastructure layer - External dependencies and implementations.

This layer contains all external dependencies including:
- The SendGrid HTTP transport and template client (httpx)
- Client-side rate limiting
- Desired-state file schemas (Pydantic)

The infrastructure layer implements the collaborators the application layer
reconciles against.
"""

from templatesync.infrastructure.ratelimit import RateLimiter, RateLimits
from templatesync.infrastructure.services.sendgrid import SendGridTransport, TemplateApiClient

__all__ = [
    "RateLimiter",
    "RateLimits",
    "SendGridTransport",
    "TemplateApiClient",
]

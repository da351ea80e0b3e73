"""SendGrid v3 template API client."""

from templatesync.infrastructure.services.sendgrid.template_client import TemplateApiClient
from templatesync.infrastructure.services.sendgrid.transport import SendGridTransport

__all__ = ["SendGridTransport", "TemplateApiClient"]

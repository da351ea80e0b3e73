"""TemplateSync - declarative SendGrid transactional template management.

Reconciles a desired template (a name plus ordered content versions) against
the SendGrid v3 template API.
"""

__version__ = "0.1.0"

from templatesync.application.services import TemplateReconciler, open_reconciler
from templatesync.domain.entities import TemplateSpec, TemplateState, VersionSpec

__all__ = [
    "TemplateReconciler",
    "TemplateSpec",
    "TemplateState",
    "VersionSpec",
    "open_reconciler",
    "__version__",
]

"""Application services for TemplateSync."""

from templatesync.application.services.reconciler_factory import (
    get_rate_limits,
    open_reconciler,
)
from templatesync.application.services.template_reconciler import TemplateReconciler

__all__ = ["TemplateReconciler", "get_rate_limits", "open_reconciler"]

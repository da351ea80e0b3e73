"""Domain services for TemplateSync.

Services contain logic that doesn't naturally fit within a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from templatesync.domain.services.change_detector import detect_changes
from templatesync.domain.services.state_waiter import (
    STATUS_DONE,
    STATUS_WAITING,
    StateWaiter,
    WaitPhase,
)
from templatesync.domain.services.template_id_parser import (
    TemplateIdParser,
    parse_template_id,
)

__all__ = [
    "STATUS_DONE",
    "STATUS_WAITING",
    "StateWaiter",
    "TemplateIdParser",
    "WaitPhase",
    "detect_changes",
    "parse_template_id",
]

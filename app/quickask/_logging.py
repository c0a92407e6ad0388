"""structlog access for quickask.

Each collaborator keeps one logger with its ``component`` bound once at
construction; tests may hand in their own logger instead.
"""

from typing import Any, Optional

import structlog


def get_component_logger(component: str, logger: Optional[Any] = None) -> Any:
    """Return ``logger`` (or the structlog default) tagged with ``component``."""
    return (logger or structlog.get_logger()).bind(component=component)

"""Core utilities package."""

from .datetime import utcnow
from .logging_utils import log_component_action, setup_universal_logging

__all__ = [
    "log_component_action",
    "setup_universal_logging",
    "utcnow",
]

"""Errors raised by the component store."""

from typing import Any, Dict, Optional


class ComponentStoreException(Exception):
    """Base exception for component store errors."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ComponentNotFoundError(ComponentStoreException):
    status_code = 404


class InvalidComponentError(ComponentStoreException):
    """A component violates the stage, type or input rules."""

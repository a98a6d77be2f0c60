"""Errors raised while synthesizing a pipeline script."""

from typing import Any, Dict, Optional


class ScriptSynthesisError(Exception):
    """Base exception for script synthesis errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)


class EmptyWorkflowError(ScriptSynthesisError):
    """The manifest has no nodes to generate."""


class MissingCallableNameError(ScriptSynthesisError):
    """A node has neither a code identifier nor a display name."""


class InvalidCallableNameError(ScriptSynthesisError):
    """The resolved callable name is not a usable Python identifier."""


class InvalidBindingNameError(ScriptSynthesisError):
    """A variable binding key cannot be used as a keyword argument."""


class UnsupportedBindingError(ScriptSynthesisError):
    """A variable binding value has no literal form."""


class RoleStageMismatchError(ScriptSynthesisError):
    """An explicit node role cannot run in the node's stage."""

"""
Stagecraft: turn staged component workflows into standalone pipeline scripts.
"""

from .assembler import assemble, generate_script, missing_definitions
from .constants import NodeRole, Stage
from .exceptions import (
    EmptyWorkflowError,
    InvalidBindingNameError,
    InvalidCallableNameError,
    MissingCallableNameError,
    RoleStageMismatchError,
    ScriptSynthesisError,
    UnsupportedBindingError,
)
from .partitioner import partition
from .schemas import NodeInput, PipelineNode, WorkflowManifest
from .synthesizer import resolve_callable_name, synthesize

__version__ = "0.1.0"

__all__ = [
    "EmptyWorkflowError",
    "InvalidBindingNameError",
    "InvalidCallableNameError",
    "MissingCallableNameError",
    "NodeInput",
    "NodeRole",
    "PipelineNode",
    "RoleStageMismatchError",
    "ScriptSynthesisError",
    "Stage",
    "UnsupportedBindingError",
    "WorkflowManifest",
    "assemble",
    "generate_script",
    "missing_definitions",
    "partition",
    "resolve_callable_name",
    "synthesize",
]

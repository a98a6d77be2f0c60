"""
Per-node invocation synthesis.

Turns one pipeline node into the block of Python that calls its component
inside ``execute_pipeline``. Component bodies are never inspected, only the
resolved callable name and the rendered keyword arguments are used.
"""

import keyword
import logging

from .constants import (
    CROSS_VALIDATION_KEYWORDS,
    RESERVED_NAMES,
    ROW_FILTER_KEYWORDS,
    SPLIT_KEYWORDS,
    STAGE_ROLES,
    TARGET_COLUMN_PARAM,
    NodeRole,
    Stage,
)
from .exceptions import (
    InvalidCallableNameError,
    MissingCallableNameError,
    RoleStageMismatchError,
)
from .literals import render_bindings
from .partitioner import effective_stage
from .schemas import PipelineNode
from . import templates

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    """'Train Test Split' -> 'train_test_split'"""
    return name.lower().replace(" ", "_")


def resolve_callable_name(node: PipelineNode) -> str:
    """
    Name of the function a node invokes.

    The explicit code identifier wins; otherwise the display name is
    slugified.

    Raises:
        MissingCallableNameError: Neither field is set
        InvalidCallableNameError: The result is not a usable identifier or
            collides with a name the script skeleton binds
    """
    if node.code:
        name = node.code
    elif node.name:
        name = slugify(node.name)
    else:
        raise MissingCallableNameError(
            "Pipeline node has neither a code identifier nor a name",
            details={"node_id": node.id},
        )

    if not name.isidentifier() or keyword.iskeyword(name):
        raise InvalidCallableNameError(
            f"'{name}' is not a valid Python function name",
            details={"node_id": node.id, "callable_name": name},
        )
    if name in RESERVED_NAMES:
        raise InvalidCallableNameError(
            f"'{name}' is used by the generated script itself, rename the component",
            details={"node_id": node.id, "callable_name": name},
        )
    return name


def display_name(node: PipelineNode) -> str:
    return node.name or node.code


def _contains_any(text: str, keywords) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in keywords)


def infer_role(callable_name: str, stage: int) -> NodeRole:
    """Fallback role detection from the callable name."""
    if stage in (Stage.PREPROCESSING, Stage.FEATURE_ENGINEERING):
        if _contains_any(callable_name, SPLIT_KEYWORDS):
            return NodeRole.SPLIT
        if _contains_any(callable_name, ROW_FILTER_KEYWORDS):
            return NodeRole.ROW_FILTER
        return NodeRole.TRANSFORM
    if stage == Stage.MODEL_TRAINING:
        return NodeRole.FIT
    if _contains_any(callable_name, CROSS_VALIDATION_KEYWORDS):
        return NodeRole.CROSS_VALIDATION
    return NodeRole.EVALUATE


def resolve_role(node: PipelineNode, callable_name: str, stage: int) -> NodeRole:
    stage = effective_stage(stage)
    if node.role is None:
        return infer_role(callable_name, stage)

    allowed = STAGE_ROLES[Stage(stage)]
    if node.role not in allowed:
        raise RoleStageMismatchError(
            f"Role '{node.role.value}' cannot run in stage {stage}",
            details={
                "node_id": node.id,
                "role": node.role.value,
                "stage": stage,
                "allowed_roles": [role.value for role in allowed],
            },
        )
    return node.role


def _keyword_tail(rendered: str) -> str:
    return f", {rendered}" if rendered else ""


def synthesize(node: PipelineNode, index: int, total: int, stage: int) -> str:
    """
    Emit the execution block for one node.

    Args:
        node: Node to invoke
        index: 1-based position of the node inside its stage
        total: Number of nodes in the stage
        stage: Stage the node runs in (already normalised by the partitioner)

    Returns:
        str: Indented Python source for the body of ``execute_pipeline``
    """
    func = resolve_callable_name(node)
    role = resolve_role(node, func, stage)
    progress = repr(f"  [{index}/{total}] Executing: {display_name(node)}")

    if role is NodeRole.SPLIT:
        args = render_bindings(node.variables, exclude=(TARGET_COLUMN_PARAM,))
    else:
        args = render_bindings(node.variables)

    logger.debug("Synthesizing %s as %s in stage %s", func, role.value, stage)

    fields = {"progress": progress, "func": func, "args": _keyword_tail(args)}
    if role is NodeRole.SPLIT:
        return templates.SPLIT_NODE.substitute(fields)
    if role is NodeRole.TRANSFORM:
        return templates.TRANSFORM_NODE.substitute(fields, label_sync="")
    if role is NodeRole.ROW_FILTER:
        return templates.TRANSFORM_NODE.substitute(fields, label_sync=templates.LABEL_SYNC)
    if role is NodeRole.FIT:
        return templates.FIT_NODE.substitute(fields)
    if role is NodeRole.CROSS_VALIDATION:
        return templates.CROSS_VALIDATION_NODE.substitute(fields)
    return templates.EVALUATE_NODE.substitute(fields)

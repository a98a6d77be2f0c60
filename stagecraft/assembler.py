"""
Script assembly.

Wraps the per-node blocks in the fixed program skeleton: header and imports,
component bodies, the staged ``execute_pipeline`` function, output
persistence and the command line entry point.
"""

import logging
import re
from datetime import datetime, timezone
from typing import List, Optional, Union

from .constants import STAGE_NUMBERS
from .exceptions import EmptyWorkflowError
from .partitioner import partition
from .schemas import WorkflowManifest
from .synthesizer import resolve_callable_name, synthesize
from . import templates

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _coerce_manifest(manifest: Union[WorkflowManifest, dict]) -> WorkflowManifest:
    if isinstance(manifest, WorkflowManifest):
        return manifest
    return WorkflowManifest.model_validate(manifest)


def _docstring_safe(text: str) -> str:
    # Header values end up inside a triple quoted docstring
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def assemble(
    manifest: Union[WorkflowManifest, dict],
    component_code: str,
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Build the standalone pipeline script.

    Args:
        manifest: Ordered workflow nodes plus export metadata
        component_code: Concatenated component source, embedded verbatim
        generated_at: Timestamp written into the header; now (UTC) when omitted

    Returns:
        str: Complete Python program

    Raises:
        EmptyWorkflowError: The manifest has no nodes
        ScriptSynthesisError: Any node cannot be synthesized
    """
    manifest = _coerce_manifest(manifest)
    if not manifest.nodes:
        raise EmptyWorkflowError("Workflow has no nodes to generate a script from")

    timestamp = generated_at or datetime.now(timezone.utc)
    parts = [
        templates.HEADER.substitute(
            generated_at=timestamp.strftime(TIMESTAMP_FORMAT),
            version=_docstring_safe(manifest.version),
            node_count=len(manifest.nodes),
            component_code=component_code,
        )
    ]

    stages = partition(manifest.nodes)
    for stage in STAGE_NUMBERS:
        nodes = stages[stage]
        if not nodes:
            continue
        parts.append(templates.STAGE_BANNER.substitute(stage=stage))
        for position, node in enumerate(nodes, start=1):
            parts.append(synthesize(node, position, len(nodes), stage))

    parts.append(
        templates.FOOTER.substitute(
            exit_file_not_found=templates.EXIT_FILE_NOT_FOUND,
            exit_missing_column=templates.EXIT_MISSING_COLUMN,
            exit_generic_failure=templates.EXIT_GENERIC_FAILURE,
        )
    )

    logger.info(
        "Assembled pipeline script with %d components across %d stages",
        len(manifest.nodes),
        sum(1 for stage in STAGE_NUMBERS if stages[stage]),
    )
    return "".join(parts)


def missing_definitions(
    manifest: Union[WorkflowManifest, dict], component_code: str
) -> List[str]:
    """
    Callable names the generated script would call but the body never defines.

    This is a static text search for ``def <name>(``, so functions bound by
    assignment or imported under that name are reported as missing too.
    """
    manifest = _coerce_manifest(manifest)
    missing: List[str] = []
    for node in manifest.nodes:
        name = resolve_callable_name(node)
        if name in missing:
            continue
        pattern = re.compile(rf"^\s*(?:async\s+)?def\s+{re.escape(name)}\s*\(", re.MULTILINE)
        if not pattern.search(component_code):
            missing.append(name)
    return missing


def generate_script(
    manifest: Union[WorkflowManifest, dict],
    component_code: str,
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """Validate a workflow and generate its script in one call."""
    manifest = _coerce_manifest(manifest)
    undefined = missing_definitions(manifest, component_code)
    if undefined:
        logger.warning("Component code does not define: %s", ", ".join(undefined))
    return assemble(manifest, component_code, generated_at=generated_at)

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .constants import NodeRole


class NodeInput(BaseModel):
    name: str
    type: str


class PipelineNode(BaseModel):
    """One step of an exported workflow."""

    id: str = ""
    name: str = ""
    stage: int = 1
    description: Optional[str] = None
    code: str = Field(
        default="",
        description="Explicit callable name; derived from `name` when empty.",
    )
    inputs: List[NodeInput] = []
    output: Optional[Dict[str, Any]] = None
    variables: Dict[str, Any] = {}
    role: Optional[NodeRole] = Field(
        default=None,
        description="Call shape override; inferred from the callable name when absent.",
    )


class WorkflowManifest(BaseModel):
    version: str = ""
    exported_at: Optional[str] = None
    nodes: List[PipelineNode] = []

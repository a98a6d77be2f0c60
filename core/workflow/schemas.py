"""Request and response models for workflow endpoints."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from stagecraft.constants import NodeRole
from stagecraft.schemas import WorkflowManifest


class WorkflowItem(BaseModel):
    type: Literal["id", "code"] = Field(..., description="Stored component id or raw code")
    value: str = Field(..., min_length=1)


class RunCodeRequest(BaseModel):
    items: List[WorkflowItem] = Field(..., min_length=1)


class ExecutionDetails(BaseModel):
    output: str
    error: Optional[str] = None


class RunCodeResponse(BaseModel):
    message: str
    total_items: int
    concatenated_code: str
    components: List[Dict[str, Any]]
    execution: ExecutionDetails


class GenerateScriptRequest(BaseModel):
    workflow: WorkflowManifest
    component_code: Optional[str] = Field(
        default=None,
        description="Concatenated component source; fetched by node id when omitted.",
    )


class GenerateScriptResponse(BaseModel):
    script: str
    total_components: int
    missing_definitions: List[str]


class ExportItem(BaseModel):
    id: str = Field(..., min_length=1, description="Stored component id")
    function_name: str = Field(
        default="",
        description="Callable to invoke; derived from the component name when empty.",
    )
    variables: Dict[str, Any] = {}
    role: Optional[NodeRole] = None


class ExportRequest(BaseModel):
    items: List[ExportItem] = Field(..., min_length=1)
    version: str = "1.0"

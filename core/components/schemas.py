"""Request and response models for the component store API."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.database.models import STAGE_NAMES
from schemas.base import BaseSchema
from .exceptions import InvalidComponentError

INPUT_TYPES = frozenset({
    "string", "int", "float", "tensor", "bool", "list", "dict", "DataFrame",
    "Series", "tuple", "array", "object", "iterable", "datetime", "ndarray",
    "function", "keras.model", "callable", "any",
})

OUTPUT_TYPES = frozenset({
    "string", "int", "float", "tensor", "bool", "list", "dict", "any",
    "DataFrame", "Series", "tuple", "array", "object", "iterable", "datetime",
    "ndarray", "none",
})


class ComponentInput(BaseModel):
    name: str
    type: str
    description: str = ""
    required: bool = False
    default_value: Optional[Any] = None


class ComponentOutput(BaseModel):
    type: str
    description: str = ""


class ComponentCreate(BaseModel):
    """Body of create and update requests."""
    name: str = Field(..., min_length=1)
    description: str = ""
    code: str = Field(..., min_length=1)
    language: str = Field(..., min_length=1, description='e.g. "python"')
    stage: str = Field(..., description="One of stage1, stage2, stage3, stage4")
    tags: List[str] = []
    inputs: List[ComponentInput] = []
    output: Optional[ComponentOutput] = None

    def check_rules(self) -> None:
        """
        Enforce the component store rules.

        Raises:
            InvalidComponentError: Unknown stage, unknown input or output
                type, or no inputs at all
        """
        if self.stage not in STAGE_NAMES:
            raise InvalidComponentError(
                "Invalid stage. Must be stage1, stage2, stage3, or stage4",
                details={"stage": self.stage},
            )

        bad_inputs = [item.type for item in self.inputs if item.type not in INPUT_TYPES]
        if bad_inputs:
            raise InvalidComponentError(
                f"Invalid input type: {', '.join(bad_inputs)}",
                details={"allowed": sorted(INPUT_TYPES), "invalid": bad_inputs},
            )

        if self.output is not None and self.output.type not in OUTPUT_TYPES:
            raise InvalidComponentError(
                f"Invalid output type: {self.output.type}",
                details={"allowed": sorted(OUTPUT_TYPES), "invalid": self.output.type},
            )

        if not self.inputs:
            raise InvalidComponentError("Component must have at least one input")

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "code": self.code,
            "language": self.language,
            "stage": self.stage,
            "tags": list(self.tags),
            "inputs": [item.model_dump() for item in self.inputs],
            "output": self.output.model_dump() if self.output else None,
        }


class ComponentResponse(BaseSchema):
    id: str
    name: str
    description: str
    code: str
    language: str
    stage: str
    tags: List[str]
    inputs: List[ComponentInput]
    output: Optional[ComponentOutput] = None
    created_at: datetime
    updated_at: datetime


class ComponentListResponse(BaseModel):
    count: int
    components: List[ComponentResponse]


class StageComponentsResponse(ComponentListResponse):
    stage: str


class InputTypeComponentsResponse(ComponentListResponse):
    input_type: str


class OutputTypeComponentsResponse(ComponentListResponse):
    output_type: str


class StageCount(BaseModel):
    stage: str
    count: int


class StageStatsResponse(BaseModel):
    stats: List[StageCount]


class ComponentCreatedResponse(BaseModel):
    message: str
    component: ComponentResponse


class ComponentMutationResponse(BaseModel):
    message: str
    id: str

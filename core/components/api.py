"""Component store API routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from core.database.models import STAGE_NAMES
from core.database.repository import ComponentRepository
from core.utils.logging_utils import log_component_action
from dependencies import get_component_repo
from .exceptions import InvalidComponentError
from .schemas import (
    ComponentCreate,
    ComponentCreatedResponse,
    ComponentListResponse,
    ComponentMutationResponse,
    ComponentResponse,
    InputTypeComponentsResponse,
    OutputTypeComponentsResponse,
    StageComponentsResponse,
    StageStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/components", tags=["Components"])
stages_router = APIRouter(prefix="/stages", tags=["Components"])


def _listing(components) -> dict:
    return {
        "count": len(components),
        "components": [ComponentResponse.model_validate(item) for item in components],
    }


def _validated(payload: ComponentCreate) -> ComponentCreate:
    try:
        payload.check_rules()
    except InvalidComponentError as e:
        logger.info(f"Rejected component '{payload.name}': {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return payload


@router.get("", response_model=ComponentListResponse)
async def list_components(
    stage: Optional[str] = None,
    language: Optional[str] = None,
    output_type: Optional[str] = None,
    has_output: Optional[bool] = None,
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    repo: ComponentRepository = Depends(get_component_repo),
):
    """List components, newest first, with optional filters."""
    components = await repo.list_components(
        stage=stage,
        language=language,
        output_type=output_type,
        has_output=has_output,
        skip=skip,
        limit=limit,
    )
    return _listing(components)


@router.get("/search", response_model=ComponentListResponse)
async def search_components(
    name: str = Query("", description="Case-insensitive substring of the name"),
    repo: ComponentRepository = Depends(get_component_repo),
):
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name query parameter is required",
        )
    return _listing(await repo.search_by_name(name))


@router.get("/stats", response_model=StageStatsResponse)
async def stage_stats(repo: ComponentRepository = Depends(get_component_repo)):
    return {"stats": await repo.get_stage_stats()}


@router.get("/by-input-type", response_model=InputTypeComponentsResponse)
async def components_by_input_type(
    type: str = Query(""),
    repo: ComponentRepository = Depends(get_component_repo),
):
    if not type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Type query parameter is required",
        )
    return {"input_type": type, **_listing(await repo.get_by_input_type(type))}


@router.get("/by-output-type", response_model=OutputTypeComponentsResponse)
async def components_by_output_type(
    type: str = Query(""),
    repo: ComponentRepository = Depends(get_component_repo),
):
    if not type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Type query parameter is required",
        )
    return {"output_type": type, **_listing(await repo.get_by_output_type(type))}


@router.get("/{component_id}", response_model=ComponentResponse)
async def get_component(
    component_id: str,
    repo: ComponentRepository = Depends(get_component_repo),
):
    component = await repo.get(component_id)
    if component is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found")
    return component


@router.post("", response_model=ComponentCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_component(
    payload: ComponentCreate,
    repo: ComponentRepository = Depends(get_component_repo),
):
    component = await repo.create(_validated(payload).to_record())
    log_component_action("create_component", details=f"id={component.id} name={component.name}")
    return {"message": "Component created successfully", "component": component}


@router.put("/{component_id}", response_model=ComponentMutationResponse)
async def update_component(
    component_id: str,
    payload: ComponentCreate,
    repo: ComponentRepository = Depends(get_component_repo),
):
    component = await repo.update(component_id, _validated(payload).to_record())
    if component is None:
        log_component_action("update_component", success=False, details=f"id={component_id} not found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found")
    log_component_action("update_component", details=f"id={component_id}")
    return {"message": "Component updated successfully", "id": component_id}


@router.delete("/{component_id}", response_model=ComponentMutationResponse)
async def delete_component(
    component_id: str,
    repo: ComponentRepository = Depends(get_component_repo),
):
    if not await repo.delete(component_id):
        log_component_action("delete_component", success=False, details=f"id={component_id} not found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found")
    log_component_action("delete_component", details=f"id={component_id}")
    return {"message": "Component deleted successfully", "id": component_id}


@stages_router.get("/{stage}/components", response_model=StageComponentsResponse)
async def components_for_stage(
    stage: str,
    repo: ComponentRepository = Depends(get_component_repo),
):
    if stage not in STAGE_NAMES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid stage. Must be stage1, stage2, stage3, or stage4",
        )
    return {"stage": stage, **_listing(await repo.get_by_stage(stage))}

"""Workflow API routes: sandbox runs, script generation and export."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from config import Settings
from dependencies import get_config
from .dependencies import get_workflow_service
from .schemas import (
    ExportRequest,
    GenerateScriptRequest,
    GenerateScriptResponse,
    RunCodeRequest,
    RunCodeResponse,
)
from .service import WorkflowService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workflow", tags=["Workflow"])

SCRIPT_MEDIA_TYPE = "text/x-python"


@router.post("/run", response_model=RunCodeResponse)
async def run_code(
    request: RunCodeRequest,
    service: WorkflowService = Depends(get_workflow_service),
):
    """
    Concatenate the items and execute them in the sandbox.

    Execution failures still return 200; the message changes and
    ``execution.error`` is filled in.
    """
    return await service.run_code(request.items)


@router.post("/generate-script", response_model=GenerateScriptResponse)
async def generate_script(
    request: GenerateScriptRequest,
    service: WorkflowService = Depends(get_workflow_service),
):
    script, missing = await service.generate(request.workflow, request.component_code)
    return GenerateScriptResponse(
        script=script,
        total_components=len(request.workflow.nodes),
        missing_definitions=missing,
    )


@router.post("/export")
async def export_script(
    request: ExportRequest,
    service: WorkflowService = Depends(get_workflow_service),
    settings: Settings = Depends(get_config),
):
    """Generate the script for stored components and return it as a download."""
    script, missing = await service.export(request.items, request.version)
    headers = {
        "Content-Disposition": f'attachment; filename="{settings.SCRIPT_EXPORT_FILENAME}"',
    }
    if missing:
        headers["X-Missing-Definitions"] = ",".join(missing)
    logger.info(f"Exported pipeline script with {len(request.items)} components")
    return Response(content=script, media_type=SCRIPT_MEDIA_TYPE, headers=headers)

"""FastAPI dependencies for workflow endpoints."""

from fastapi import Depends

from config import Settings
from core.database.repository import ComponentRepository
from dependencies import get_component_repo, get_config
from .sandbox import DockerSandboxExecutor
from .service import WorkflowService


def get_sandbox_executor(settings: Settings = Depends(get_config)) -> DockerSandboxExecutor:
    return DockerSandboxExecutor.from_settings(settings)


async def get_workflow_service(
    repo: ComponentRepository = Depends(get_component_repo),
    executor: DockerSandboxExecutor = Depends(get_sandbox_executor),
) -> WorkflowService:
    """Get workflow service dependency."""
    return WorkflowService(repo, executor)

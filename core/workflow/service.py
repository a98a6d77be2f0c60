"""
Workflow service: runs concatenated components in the sandbox and turns
workflows into standalone pipeline scripts.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.components.exceptions import ComponentNotFoundError
from core.database.models import Component
from core.database.repository import ComponentRepository
from stagecraft import assemble, missing_definitions
from stagecraft.schemas import PipelineNode, WorkflowManifest
from .sandbox import DockerSandboxExecutor, ExecutionResult, SandboxExecutionError
from .schemas import ExportItem, WorkflowItem

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"


class WorkflowService:
    def __init__(self, repository: ComponentRepository, executor: DockerSandboxExecutor):
        self.repository = repository
        self.executor = executor

    async def _fetch_in_order(self, ids: Sequence[str]) -> List[Component]:
        found = await self.repository.get_many(ids)
        components = []
        for index, component_id in enumerate(ids):
            component = found.get(component_id)
            if component is None:
                raise ComponentNotFoundError(
                    f"Component not found at index {index}: {component_id}",
                    details={"index": index, "id": component_id},
                )
            components.append(component)
        return components

    async def run_code(self, items: Sequence[WorkflowItem]) -> Dict[str, Any]:
        """
        Concatenate stored components and raw code in order and execute the
        result in the sandbox.

        Raises:
            ComponentNotFoundError: An ``id`` item does not exist
        """
        found = await self.repository.get_many([item.value for item in items if item.type == "id"])

        blocks: List[str] = []
        details: List[Dict[str, Any]] = []
        for index, item in enumerate(items):
            if item.type == "id":
                component = found.get(item.value)
                if component is None:
                    raise ComponentNotFoundError(
                        f"Component not found at index {index}: {item.value}",
                        details={"index": index, "id": item.value},
                    )
                blocks.append(component.code)
                details.append({
                    "index": index,
                    "type": "component",
                    "id": component.id,
                    "name": component.name,
                    "description": component.description,
                    "stage": component.stage,
                    "language": component.language,
                    "inputs": component.inputs,
                    "output": component.output,
                })
            else:
                blocks.append(item.value)
                details.append({"index": index, "type": "raw_code", "code": item.value})

        concatenated = BLOCK_SEPARATOR.join(blocks)
        logger.debug("Concatenated code for sandbox run:\n%s", concatenated)

        try:
            result = await self.executor.execute(concatenated)
        except SandboxExecutionError as e:
            logger.error(f"Sandbox run could not start: {e}")
            result = ExecutionResult(output="", error=str(e))

        execution: Dict[str, Any] = {"output": result.output}
        message = "Code executed successfully"
        if not result.succeeded:
            execution["error"] = result.error
            message = "Code execution failed"

        return {
            "message": message,
            "total_items": len(items),
            "concatenated_code": concatenated,
            "components": details,
            "execution": execution,
        }

    async def component_code_for(self, manifest: WorkflowManifest) -> str:
        """Concatenated source of the stored components a manifest refers to."""
        ids: List[str] = []
        for node in manifest.nodes:
            if node.id and node.id not in ids:
                ids.append(node.id)
        components = await self._fetch_in_order(ids)
        return BLOCK_SEPARATOR.join(component.code for component in components)

    async def generate(
        self,
        manifest: WorkflowManifest,
        component_code: Optional[str] = None,
        *,
        generated_at: Optional[datetime] = None,
    ) -> Tuple[str, List[str]]:
        """
        Generate the pipeline script for a manifest.

        Returns:
            (script, names of callables the component code does not define)
        """
        if component_code is None:
            component_code = await self.component_code_for(manifest)

        missing = missing_definitions(manifest, component_code)
        if missing:
            logger.warning("Component code does not define: %s", ", ".join(missing))
        return assemble(manifest, component_code, generated_at=generated_at), missing

    async def build_manifest(self, items: Sequence[ExportItem], version: str) -> Tuple[WorkflowManifest, str]:
        """Manifest plus concatenated source for export items, in item order."""
        components = await self._fetch_in_order([item.id for item in items])
        nodes = [
            PipelineNode(
                id=component.id,
                name=component.name,
                stage=component.stage_number,
                description=component.description,
                code=item.function_name,
                inputs=[{"name": i.get("name", ""), "type": i.get("type", "any")} for i in component.inputs or []],
                output=component.output,
                variables=item.variables,
                role=item.role,
            )
            for item, component in zip(items, components)
        ]
        manifest = WorkflowManifest(
            version=version,
            exported_at=datetime.now(timezone.utc).isoformat(),
            nodes=nodes,
        )

        seen = set()
        blocks = []
        for component in components:
            if component.id not in seen:
                seen.add(component.id)
                blocks.append(component.code)
        return manifest, BLOCK_SEPARATOR.join(blocks)

    async def export(self, items: Sequence[ExportItem], version: str) -> Tuple[str, List[str]]:
        manifest, component_code = await self.build_manifest(items, version)
        return await self.generate(manifest, component_code)

"""
Sandboxed code execution.

Code is written to a file in a shared work directory and run by
``python`` inside a throwaway Docker container with no network and capped
memory and CPU.
"""

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from config import Settings

logger = logging.getLogger(__name__)

STDERR_SEPARATOR = "\n[STDERR]\n"


@dataclass
class ExecutionResult:
    """Captured output of one sandbox run; ``error`` is None on success."""
    output: str
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class SandboxExecutionError(Exception):
    """The sandbox could not be prepared or the container could not be started."""


class DockerSandboxExecutor:
    def __init__(
        self,
        image: str = "python:3.11-slim",
        work_dir: str = "/tmp/code_execution",
        memory_limit: str = "2g",
        cpu_limit: str = "2",
        network: str = "none",
        timeout_seconds: Optional[float] = None,
    ):
        self.image = image
        self.work_dir = Path(work_dir)
        self.memory_limit = memory_limit
        self.cpu_limit = cpu_limit
        self.network = network
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "DockerSandboxExecutor":
        return cls(
            image=settings.SANDBOX_DOCKER_IMAGE,
            work_dir=settings.SANDBOX_WORK_DIR,
            memory_limit=settings.SANDBOX_MEMORY_LIMIT,
            cpu_limit=settings.SANDBOX_CPU_LIMIT,
            network=settings.SANDBOX_NETWORK,
            timeout_seconds=settings.SANDBOX_TIMEOUT_SECONDS,
        )

    def build_command(self, filename: str, container_name: str) -> List[str]:
        return [
            "docker", "run",
            "--rm",
            "--name", container_name,
            "-v", f"{self.work_dir}:/code",
            "--network", self.network,
            "--memory", self.memory_limit,
            "--cpus", self.cpu_limit,
            self.image,
            "python", f"/code/{filename}",
        ]

    def _write_script(self, code: str) -> Path:
        try:
            self.work_dir.mkdir(parents=True, exist_ok=True)
            path = self.work_dir / f"script_{uuid.uuid4().hex}.py"
            path.write_text(code, encoding="utf-8")
        except OSError as e:
            raise SandboxExecutionError(f"failed to write code to sandbox directory: {e}") from e
        return path

    async def _kill_container(self, container_name: str) -> None:
        # Killing the docker client leaves the container running
        try:
            killer = await asyncio.create_subprocess_exec(
                "docker", "kill", container_name,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await killer.wait()
        except OSError as e:
            logger.error(f"Could not kill container {container_name}: {e}")

    async def execute(self, code: str) -> ExecutionResult:
        """
        Run ``code`` and capture its output.

        A non-zero exit returns stderr as the output together with an error
        message. A successful run returns stdout, followed by a ``[STDERR]``
        section when the program wrote to stderr.

        Raises:
            SandboxExecutionError: The script file or the docker process
                could not be created
        """
        path = self._write_script(code)
        container_name = f"stagecraft-{uuid.uuid4().hex}"
        command = self.build_command(path.name, container_name)
        logger.info(f"Running sandboxed script {path.name} in {self.image}")

        try:
            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                raise SandboxExecutionError(f"failed to start docker: {e}") from e

            try:
                stdout, stderr = await asyncio.wait_for(
                    process.communicate(), timeout=self.timeout_seconds
                )
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()
                await self._kill_container(container_name)
                logger.warning(f"Sandboxed script {path.name} timed out after {self.timeout_seconds}s")
                return ExecutionResult(
                    output="",
                    error=f"execution error: timed out after {self.timeout_seconds} seconds",
                )
        finally:
            try:
                os.remove(path)
            except OSError:
                logger.warning(f"Could not remove sandbox script {path}")

        out_text = stdout.decode("utf-8", errors="replace")
        err_text = stderr.decode("utf-8", errors="replace")

        if process.returncode != 0:
            logger.info(f"Sandboxed script {path.name} exited with status {process.returncode}")
            return ExecutionResult(
                output=err_text,
                error=f"execution error: exit status {process.returncode}",
            )

        if err_text:
            out_text += STDERR_SEPARATOR + err_text
        return ExecutionResult(output=out_text)

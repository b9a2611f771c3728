from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .enums import ChunkStatus


class JobConfig(BaseModel):
    """Immutable description of one array job and its working directory."""

    model_config = {"frozen": True}

    work_dir: str
    query: Optional[str] = None
    target: str = ""
    command: Optional[str] = None
    qsub_options: str = ""

    task_min: Optional[int] = Field(default=None, ge=1)
    task_max: Optional[int] = Field(default=None, ge=1)
    task_step: int = Field(default=1000, ge=1)
    slice_size: int = Field(default=1000, ge=1)

    log_dir: str = "log"
    input_dir: str = "input"
    output_dir: str = "output"
    error_dir: str = "error"
    script_file: str = "script.py"
    manifest_file: str = "count.txt"

    @classmethod
    def from_settings(cls, settings, work_dir: str | None = None, **overrides) -> JobConfig:
        """Build a JobConfig from Settings defaults plus per-run values.

        ``query`` and ``target`` are resolved against ``work_dir``; absolute
        paths are kept as given.
        """
        work_dir = os.path.abspath(work_dir or os.getcwd())
        values = {
            "work_dir": work_dir,
            "qsub_options": settings.qsub_options,
            "task_step": settings.task_step,
            "slice_size": settings.slice_size,
            "log_dir": settings.log_dir,
            "input_dir": settings.input_dir,
            "output_dir": settings.output_dir,
            "error_dir": settings.error_dir,
            "script_file": settings.script_file,
            "manifest_file": settings.manifest_file,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        for key in ("query", "target"):
            if values.get(key):
                values[key] = os.path.join(work_dir, values[key])
        return cls(**values)

    def path(self, name: str) -> Path:
        return Path(self.work_dir) / name

    @property
    def manifest_path(self) -> Path:
        return self.path(self.manifest_file)

    @property
    def script_path(self) -> Path:
        return self.path(self.script_file)


class Chunk(BaseModel):
    """A contiguous task-id range submitted with a single qsub call."""

    model_config = {"frozen": True}

    start: int
    end: int
    step: int

    @property
    def span(self) -> str:
        return f"{self.start}-{self.end}:{self.step}"


class ChunkResult(BaseModel):
    chunk: Chunk
    argv: list[str]
    status: ChunkStatus
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.status != ChunkStatus.FAILED


class WorkerScriptParams(BaseModel):
    """Values substituted into the generated worker script."""

    interpreter: str
    work_dir: str
    input_dir: str
    output_dir: str
    error_dir: str
    target: str
    command: str
    slice_size: int = Field(default=1000, ge=1)

    @classmethod
    def from_job(cls, job: JobConfig, interpreter: str) -> WorkerScriptParams:
        return cls(
            interpreter=interpreter,
            work_dir=job.work_dir,
            input_dir=job.input_dir,
            output_dir=job.output_dir,
            error_dir=job.error_dir,
            target=job.target,
            command=job.command or "",
            slice_size=job.slice_size,
        )

"""Submitter: splits the task range into qsub array submissions.

Grid Engine refuses array jobs larger than its max_aj_tasks limit, so the
range [task_min, task_max] is cut into chunks of at most ``max_array_size``
tasks, each submitted with its own ``-t start-end:step``. A failed qsub call
is recorded for its chunk and does not stop the remaining chunks.
"""

from __future__ import annotations

import asyncio
import logging
import shlex

from sgearray.adapters.base import Launcher
from sgearray.config import Settings
from sgearray.core.manifest import Manifest
from sgearray.models import Chunk, ChunkResult, ChunkStatus, JobConfig

logger = logging.getLogger(__name__)


def plan_chunks(task_min: int, task_max: int, task_step: int, ceiling: int) -> list[Chunk]:
    """Chunk starts advance by ``ceiling``; each end is clamped to ``task_max``."""
    return [
        Chunk(start=start, end=min(start + ceiling, task_max), step=task_step)
        for start in range(task_min, task_max + 1, ceiling)
    ]


def build_command(chunk: Chunk, job: JobConfig, qsub_executable: str = "qsub") -> list[str]:
    return [
        qsub_executable,
        *shlex.split(job.qsub_options),
        "-o", job.log_dir,
        "-e", job.log_dir,
        "-cwd",
        "-t", chunk.span,
        job.script_file,
    ]


class Submitter:
    def __init__(self, launcher: Launcher, settings: Settings):
        self.launcher = launcher
        self.settings = settings

    def resolve_range(self, job: JobConfig, total: int | None = None) -> tuple[int, int, int]:
        """Return (task_min, task_max, task_step) for ``job``.

        The manifest is only read when ``total`` is not already known.
        """
        if total is None:
            total = Manifest(job.manifest_path).total_count()
        task_min = job.task_min or 1
        task_max = job.task_max or total
        task_step = job.task_step or self.settings.task_step
        return task_min, task_max, task_step

    def plan(self, job: JobConfig, total: int | None = None) -> list[Chunk]:
        task_min, task_max, task_step = self.resolve_range(job, total)
        chunks = plan_chunks(task_min, task_max, task_step, self.settings.max_array_size)
        if not chunks:
            logger.warning("Nothing to submit: task range %d-%d is empty", task_min, task_max)
        return chunks

    async def submit(
        self,
        job: JobConfig,
        total: int | None = None,
        concurrent: bool = False,
        dry_run: bool = False,
    ) -> list[ChunkResult]:
        chunks = self.plan(job, total)
        commands = [build_command(c, job, self.settings.qsub_executable) for c in chunks]

        if dry_run:
            for chunk, argv in zip(chunks, commands):
                logger.info("Dry run, not submitting: %s", shlex.join(argv))
            return [
                ChunkResult(chunk=chunk, argv=argv, status=ChunkStatus.DRY_RUN)
                for chunk, argv in zip(chunks, commands)
            ]

        if concurrent:
            return list(await asyncio.gather(
                *(self._submit_chunk(c, argv) for c, argv in zip(chunks, commands))
            ))

        results = []
        for chunk, argv in zip(chunks, commands):
            results.append(await self._submit_chunk(chunk, argv))
        return results

    async def _submit_chunk(self, chunk: Chunk, argv: list[str]) -> ChunkResult:
        logger.info("Submitting ... %s", shlex.join(argv))
        try:
            returncode, stdout, stderr = await self.launcher.launch(argv)
        except OSError as exc:
            logger.error("Chunk %s: cannot run %s: %s", chunk.span, argv[0], exc)
            return ChunkResult(
                chunk=chunk, argv=argv, status=ChunkStatus.FAILED, stderr=str(exc),
            )

        if returncode != 0:
            logger.error(
                "Chunk %s: %s exited with %d: %s",
                chunk.span, argv[0], returncode, stderr.strip(),
            )
            status = ChunkStatus.FAILED
        else:
            status = ChunkStatus.SUBMITTED
        return ChunkResult(
            chunk=chunk, argv=argv, status=status,
            returncode=returncode, stdout=stdout, stderr=stderr,
        )

"""ArrayJob: prepares a working directory and submits it as Grid Engine array jobs.

Typical use::

    job = JobConfig.from_settings(settings, query="query.pep", target="target.pep",
                                  command="blastall -p blastp -i {query} -d {target}")
    aj = ArrayJob(job, settings, launcher=QsubLauncher(cwd=job.work_dir))
    aj.prepare()
    results = await aj.submit()

``prepare`` creates log/input/output/error, writes the worker script and
extracts the query. Extraction is skipped when the manifest already exists,
so after ``clear`` a job can be resubmitted (e.g. with a different command)
without splitting the query again.
"""

from __future__ import annotations

import logging
import os

from sgearray.adapters.base import Launcher, RecordSource
from sgearray.adapters.flatfile import FlatFileSource
from sgearray.config import Settings
from sgearray.core.extractor import Extractor
from sgearray.core.housekeeper import Housekeeper
from sgearray.core.manifest import Manifest
from sgearray.core.script_generator import write_script
from sgearray.core.submitter import Submitter
from sgearray.errors import ConfigError, FilesystemError, SourceError
from sgearray.models import ChunkResult, JobConfig, WorkerScriptParams

logger = logging.getLogger(__name__)


class ArrayJob:
    def __init__(
        self,
        job: JobConfig,
        settings: Settings,
        launcher: Launcher | None = None,
        source: RecordSource | None = None,
    ):
        self.job = job
        self.settings = settings
        self.launcher = launcher
        self._source = source
        self.count: int | None = None
        self.housekeeper = Housekeeper(job)

    @property
    def manifest(self) -> Manifest:
        return Manifest(self.job.manifest_path)

    @property
    def source(self) -> RecordSource:
        if self._source is None:
            if not self.job.query:
                raise ConfigError("No query file given")
            self._source = FlatFileSource(self.job.query)
        return self._source

    def _require_command(self) -> None:
        if not self.job.command:
            raise ConfigError("No command given")

    def _require_query_file(self) -> None:
        if not self.job.query:
            raise ConfigError("No query file given")
        if not os.path.isfile(self.job.query) or not os.access(self.job.query, os.R_OK):
            raise ConfigError(f"Query file {self.job.query} is not a readable file")

    def setup(self) -> None:
        for name in (self.job.log_dir, self.job.input_dir, self.job.output_dir, self.job.error_dir):
            path = self.job.path(name)
            if path.is_dir():
                logger.debug("Creating %s ... skip (already exists)", path)
                continue
            try:
                path.mkdir(parents=True)
            except OSError as exc:
                raise FilesystemError(f"Cannot create {path}: {exc}") from exc
            logger.info("Created %s", path)

    def script(self) -> None:
        self._require_command()
        params = WorkerScriptParams.from_job(self.job, self.settings.interpreter)
        write_script(self.job.script_path, params)

    def extract(self) -> int | None:
        """Extract the query. Returns the last retained index, or None if skipped.

        When skipped, the count is left unset so that submit reads it from the
        existing manifest.
        """
        extractor = Extractor(
            self.manifest,
            self.job.path(self.job.input_dir),
            slice_size=self.job.slice_size,
            index_min=self.job.task_min,
            index_max=self.job.task_max,
        )
        if extractor.is_extracted():
            logger.info("Skip extraction: %s already exists", self.manifest.path)
            return None
        try:
            self.count = extractor.extract(self.source)
        except SourceError:
            logger.error(
                "Extraction aborted; %s is incomplete, run clean before retrying",
                self.manifest.path,
            )
            raise
        return self.count

    def prepare(self) -> None:
        self._require_command()
        if not self.manifest.exists() and self._source is None:
            self._require_query_file()
        self.setup()
        self.script()
        self.extract()

    async def submit(self, concurrent: bool = False, dry_run: bool = False) -> list[ChunkResult]:
        if self.launcher is None:
            raise ConfigError("No launcher configured for submission")
        submitter = Submitter(self.launcher, self.settings)
        results = await submitter.submit(
            self.job, total=self.count, concurrent=concurrent, dry_run=dry_run,
        )
        failed = [r for r in results if not r.ok]
        logger.info(
            "Submitted %d of %d chunks", len(results) - len(failed), len(results),
        )
        return results

    def clear(self) -> None:
        self.housekeeper.clear()

    def clean(self) -> None:
        self.housekeeper.clean()
        self.count = None

    def distclean(self) -> None:
        self.housekeeper.distclean()
        self.count = None

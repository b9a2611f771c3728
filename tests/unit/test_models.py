"""Tests for job configuration and chunk models."""

import os

import pytest
from pydantic import ValidationError

from sgearray.config import Settings
from sgearray.models import Chunk, ChunkResult, ChunkStatus, JobConfig, WorkerScriptParams


class TestJobConfig:
    def test_from_settings_resolves_paths(self, tmp_path):
        job = JobConfig.from_settings(
            Settings(), work_dir=str(tmp_path), query="data/q.fa", target="/db/nr",
        )
        assert job.work_dir == str(tmp_path)
        assert job.query == os.path.join(str(tmp_path), "data/q.fa")
        assert job.target == "/db/nr"
        assert job.manifest_path == tmp_path / "count.txt"
        assert job.script_path == tmp_path / "script.py"

    def test_from_settings_uses_settings_defaults(self, tmp_path):
        settings = Settings(task_step=50, slice_size=10, qsub_options="-l cpu_arch=xeon")
        job = JobConfig.from_settings(settings, work_dir=str(tmp_path), task_min=None)
        assert job.task_step == 50
        assert job.slice_size == 10
        assert job.qsub_options == "-l cpu_arch=xeon"
        assert job.task_min is None
        assert job.task_max is None
        assert job.target == ""

    def test_frozen(self, tmp_path):
        job = JobConfig(work_dir=str(tmp_path))
        with pytest.raises(ValidationError):
            job.task_min = 3

    def test_rejects_non_positive_bounds(self, tmp_path):
        with pytest.raises(ValidationError):
            JobConfig(work_dir=str(tmp_path), task_min=0)
        with pytest.raises(ValidationError):
            JobConfig(work_dir=str(tmp_path), task_step=0)


def test_chunk_span():
    assert Chunk(start=50001, end=100001, step=1000).span == "50001-100001:1000"


def test_chunk_result_ok():
    chunk = Chunk(start=1, end=3, step=1000)
    assert ChunkResult(chunk=chunk, argv=[], status=ChunkStatus.SUBMITTED).ok
    assert ChunkResult(chunk=chunk, argv=[], status=ChunkStatus.DRY_RUN).ok
    assert not ChunkResult(chunk=chunk, argv=[], status=ChunkStatus.FAILED, returncode=1).ok


def test_worker_params_from_job(tmp_path):
    job = JobConfig(work_dir=str(tmp_path), command="cat {query}", target="/db", slice_size=10)
    params = WorkerScriptParams.from_job(job, "/usr/bin/python3")
    assert params.interpreter == "/usr/bin/python3"
    assert params.command == "cat {query}"
    assert params.slice_size == 10
    assert params.output_dir == "output"

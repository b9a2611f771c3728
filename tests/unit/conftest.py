import pytest

from sgearray.adapters.mock import MockLauncher, MockRecordSource
from sgearray.models import JobConfig


@pytest.fixture
def work_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_job(settings, work_dir):
    def _make(**overrides):
        overrides.setdefault("command", "cat {query}")
        return JobConfig.from_settings(settings, work_dir=str(work_dir), **overrides)
    return _make


@pytest.fixture
def mock_launcher():
    return MockLauncher()


@pytest.fixture
def abc_source():
    return MockRecordSource.from_ids("A", "B", "C")

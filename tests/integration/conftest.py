import stat
import sys
from pathlib import Path

import pytest

FAKE_QSUB = Path(__file__).resolve().parent.parent / "tools" / "fake_qsub.py"


@pytest.fixture
def fake_qsub(tmp_path):
    """Executable copy of tools/fake_qsub.py bound to the running interpreter."""
    body = FAKE_QSUB.read_text().split("\n", 1)[1]
    path = tmp_path / "bin" / "qsub"
    path.parent.mkdir()
    path.write_text(f"#!{sys.executable}\n{body}")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def work_dir(tmp_path, monkeypatch):
    d = tmp_path / "work"
    d.mkdir()
    monkeypatch.chdir(d)
    return d

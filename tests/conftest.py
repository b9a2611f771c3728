import shutil
import sys

import pytest

from sgearray.config import Settings

# ---------------------------------------------------------------------------
# Environment gating
# ---------------------------------------------------------------------------
# Tests marked with @pytest.mark.sge need a real Grid Engine qsub on PATH and
# are auto-skipped otherwise.
#
# Usage:
#   pytest tests/                 — run everything, auto-skip sge tests without qsub
#   pytest tests/ -m "not sge"    — never submit to a real scheduler


def pytest_configure(config):
    config.addinivalue_line("markers", "sge: Requires a Grid Engine qsub on PATH")


def pytest_collection_modifyitems(config, items):
    if shutil.which("qsub"):
        return
    skip = pytest.mark.skip(reason="qsub not found on PATH")
    for item in items:
        if "sge" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def settings():
    return Settings(interpreter=sys.executable, log_level="DEBUG")

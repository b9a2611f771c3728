"""Worker script generator.

The generated script is executed by Grid Engine once per array task. It reads
SGE_TASK_ID, SGE_TASK_STEPSIZE and SGE_TASK_LAST, and for every task id in its
window runs the configured command on ``input/<slice>/<task_id>``, sending
stdout to ``output/<slice>/<task_id>`` and stderr to ``error/<slice>/<task_id>``.

The window of a task is ``offset .. offset + step - 1``. Grid Engine starts the
next task at ``offset + step``, so an inclusive upper bound would run that id
twice at the same time.

The configuration is emitted as Python literals at the top of the script; the
body below is fixed and does not depend on this package being installed on
the execution hosts.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from sgearray.errors import FilesystemError
from sgearray.models import WorkerScriptParams

logger = logging.getLogger(__name__)

PLACEHOLDERS = (
    "query",
    "target",
    "work_dir",
    "task_id",
    "slice",
    "input_file",
    "output_file",
    "error_file",
)

_PLACEHOLDER_RE = re.compile(r"\{(" + "|".join(PLACEHOLDERS) + r")\}")


def expand_command(command: str, values: dict[str, object]) -> str:
    """Substitute ``{name}`` placeholders; other brace groups are left as-is."""
    return _PLACEHOLDER_RE.sub(lambda m: str(values[m.group(1)]), command)


WORKER_BODY = r'''
import os
import re
import subprocess
import sys

PLACEHOLDER = re.compile(
    r"\{(query|target|work_dir|task_id|slice|input_file|output_file|error_file)\}"
)


def env_int(name, default):
    try:
        return int(os.environ[name])
    except (KeyError, ValueError):
        return default


def main():
    os.chdir(WORK_DIR)
    offset = env_int("SGE_TASK_ID", 1)
    step = max(env_int("SGE_TASK_STEPSIZE", 1), 1)
    last = env_int("SGE_TASK_LAST", offset)

    failures = 0
    current_slice = None
    for task_id in range(offset, offset + step):
        if task_id > last:
            break

        slice_no = (task_id - 1) // SLICE_SIZE + 1
        if slice_no != current_slice:
            os.makedirs(os.path.join(OUTPUT_DIR, str(slice_no)), exist_ok=True)
            os.makedirs(os.path.join(ERROR_DIR, str(slice_no)), exist_ok=True)
            current_slice = slice_no

        input_file = os.path.join(INPUT_DIR, str(slice_no), str(task_id))
        output_file = os.path.join(OUTPUT_DIR, str(slice_no), str(task_id))
        error_file = os.path.join(ERROR_DIR, str(slice_no), str(task_id))
        if not os.path.exists(input_file):
            continue

        values = {
            "query": input_file,
            "target": TARGET,
            "work_dir": WORK_DIR,
            "task_id": task_id,
            "slice": slice_no,
            "input_file": input_file,
            "output_file": output_file,
            "error_file": error_file,
        }
        command = PLACEHOLDER.sub(lambda m: str(values[m.group(1)]), COMMAND)
        with open(output_file, "wb") as out, open(error_file, "wb") as err:
            rc = subprocess.run(command, shell=True, stdout=out, stderr=err).returncode
        if rc != 0:
            failures += 1
            print("task %d: command exited with %d" % (task_id, rc), file=sys.stderr)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
'''


def render(params: WorkerScriptParams) -> str:
    lines = [
        f"#!{params.interpreter}",
        f"#$ -S {params.interpreter}",
        "# Array job worker generated by sgearray",
        "",
        f"WORK_DIR = {params.work_dir!r}",
        f"INPUT_DIR = {params.input_dir!r}",
        f"OUTPUT_DIR = {params.output_dir!r}",
        f"ERROR_DIR = {params.error_dir!r}",
        f"TARGET = {params.target!r}",
        f"COMMAND = {params.command!r}",
        f"SLICE_SIZE = {params.slice_size!r}",
    ]
    return "\n".join(lines) + "\n" + WORKER_BODY


def write_script(path: str | Path, params: WorkerScriptParams) -> Path:
    path = Path(path)
    try:
        path.write_text(render(params))
        os.chmod(path, 0o755)
    except OSError as exc:
        raise FilesystemError(f"Cannot write worker script {path}: {exc}") from exc
    logger.info("Wrote worker script %s", path)
    return path

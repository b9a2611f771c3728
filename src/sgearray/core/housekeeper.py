"""Housekeeper: idempotent removal of generated files for --clear/--clean/--distclean."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from sgearray.errors import FilesystemError
from sgearray.models import JobConfig

logger = logging.getLogger(__name__)


def remove_tree(path: str | Path) -> bool:
    """Remove a file or directory tree. Returns False if nothing was there."""
    path = Path(path)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        else:
            logger.debug("Deleting %s ... skip (not found)", path)
            return False
    except OSError as exc:
        raise FilesystemError(f"Cannot delete {path}: {exc}") from exc
    logger.info("Deleted %s", path)
    return True


class Housekeeper:
    def __init__(self, job: JobConfig):
        self.job = job

    def clear(self) -> None:
        """Remove the worker script and the output, error and log directories."""
        for name in (self.job.script_file, self.job.output_dir, self.job.error_dir, self.job.log_dir):
            remove_tree(self.job.path(name))

    def clean(self) -> None:
        """Remove the manifest and the extracted input directory."""
        for name in (self.job.manifest_file, self.job.input_dir):
            remove_tree(self.job.path(name))

    def distclean(self) -> None:
        self.clear()
        self.clean()

"""Manifest: the append-only ``<index>\\t<identifier>`` table written during extraction.

Its existence marks the input directory as already extracted, and its last
row gives the total task count used at submission time.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from sgearray.errors import FilesystemError, SubmissionError

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^(\d+)")


class Manifest:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def open_for_append(self) -> TextIO:
        try:
            return open(self.path, "a")
        except OSError as exc:
            raise FilesystemError(f"Cannot open manifest {self.path}: {exc}") from exc

    @staticmethod
    def format_row(index: int, identifier: str) -> str:
        return f"{index}\t{identifier}\n"

    def rows(self) -> Iterator[tuple[int, str]]:
        with open(self.path) as f:
            for line in f:
                line = line.rstrip("\n")
                if not line:
                    continue
                index, _, identifier = line.partition("\t")
                yield int(index), identifier

    def last_index(self) -> int | None:
        """Return the leading index of the last non-blank row, or None if there is none."""
        with open(self.path) as f:
            lines = [line for line in f if line.strip()]
        if not lines:
            return None
        m = _LEADING_INT.match(lines[-1])
        if not m:
            raise ValueError(f"Last row has no leading index: {lines[-1]!r}")
        return int(m.group(1))

    def total_count(self) -> int:
        """Return the total task count recorded in the manifest.

        Raises SubmissionError if the manifest is missing, empty or its last
        row does not start with an integer.
        """
        logger.info("Reading %s ...", self.path)
        try:
            count = self.last_index()
        except (OSError, ValueError) as exc:
            raise SubmissionError(f"Cannot read manifest {self.path}: {exc}") from exc
        if count is None:
            raise SubmissionError(f"Manifest {self.path} is empty")
        logger.info("Manifest %s: %d tasks", self.path, count)
        return count

"""Flatfile record source: splits a multi-entry file into raw records.

Two layouts are recognised, auto-detected from the first non-blank line:

- FASTA: each record starts with a ``>`` header line; the identifier is the
  first word of the header.
- Entry files terminated by ``//`` lines (GenBank, EMBL, UniProt, KEGG);
  the identifier is the second word of the first line (``LOCUS``, ``ID``,
  ``ENTRY``) with trailing ``;`` or ``.`` removed.

Files ending in ``.gz`` are decompressed on the fly.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from sgearray.errors import SourceError
from sgearray.models import FlatFileFormat, Record

from .base import RecordSource

logger = logging.getLogger(__name__)

BUFFER_SIZE = 1024 * 1024


def _open(path: Path) -> BinaryIO:
    if path.suffix in (".gz", ".bgz"):
        return gzip.open(path, "rb")
    return open(path, "rb", buffering=BUFFER_SIZE)


def detect_format(first_line: bytes) -> FlatFileFormat:
    if first_line.lstrip().startswith(b">"):
        return FlatFileFormat.FASTA
    return FlatFileFormat.ENTRY


def _fasta_id(header: bytes) -> str:
    words = header[1:].split()
    return words[0].decode("utf-8", errors="replace") if words else ""


def _entry_id(first_line: bytes) -> str:
    words = first_line.split()
    if not words:
        return ""
    word = words[1] if len(words) > 1 else words[0]
    return word.rstrip(b";.").decode("utf-8", errors="replace")


class FlatFileSource(RecordSource):
    def __init__(self, path: str | Path, fmt: FlatFileFormat | None = None):
        self.path = Path(path)
        self.fmt = fmt

    def records(self) -> Iterator[Record]:
        try:
            fh = _open(self.path)
        except OSError as exc:
            raise SourceError(f"Cannot open {self.path}: {exc}") from exc
        with fh:
            try:
                yield from self._split(fh)
            except (OSError, EOFError) as exc:
                raise SourceError(f"Cannot read {self.path}: {exc}") from exc

    def _split(self, fh: BinaryIO) -> Iterator[Record]:
        fmt = self.fmt
        lines: list[bytes] = []
        for line in fh:
            if not lines and not line.strip():
                continue
            if fmt is None:
                fmt = detect_format(line)
                logger.debug("Detected %s format for %s", fmt.value, self.path)

            if fmt == FlatFileFormat.FASTA:
                if line.startswith(b">") and lines:
                    yield Record(identifier=_fasta_id(lines[0]), raw=b"".join(lines))
                    lines = []
                if not lines and not line.startswith(b">"):
                    raise SourceError(f"{self.path}: FASTA record without '>' header")
                lines.append(line)
            else:
                lines.append(line)
                if line.rstrip() == b"//":
                    yield Record(identifier=_entry_id(lines[0]), raw=b"".join(lines))
                    lines = []

        if lines:
            if fmt == FlatFileFormat.FASTA:
                yield Record(identifier=_fasta_id(lines[0]), raw=b"".join(lines))
            else:
                raise SourceError(f"{self.path}: last entry is not terminated by '//'")

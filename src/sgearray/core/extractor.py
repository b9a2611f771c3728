"""Extractor: splits a record source into one numbered input file per record.

Records are numbered in source order starting at 1. The running count is
advanced for every record, including those outside ``[index_min, index_max]``;
excluded records keep their number reserved but produce neither an input
file nor a manifest row.

The total reported by ``extract`` is the index of the last retained record,
which is also the last manifest row. It equals the running count unless
``index_max`` cut off the tail, and it is the same whether or not the call
skipped extraction.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sgearray.adapters.base import RecordSource
from sgearray.core.manifest import Manifest
from sgearray.core.slicer import slice_of
from sgearray.errors import FilesystemError

logger = logging.getLogger(__name__)


class Extractor:
    def __init__(
        self,
        manifest: Manifest,
        input_dir: str | Path,
        slice_size: int = 1000,
        index_min: int | None = None,
        index_max: int | None = None,
    ):
        self.manifest = manifest
        self.input_dir = Path(input_dir)
        self.slice_size = slice_size
        self.index_min = index_min
        self.index_max = index_max

    def is_extracted(self) -> bool:
        return self.manifest.exists()

    def _excluded(self, count: int) -> bool:
        if self.index_min and count < self.index_min:
            return True
        if self.index_max and count > self.index_max:
            return True
        return False

    def extract(self, source: RecordSource) -> int:
        """Extract every record of ``source``. Returns the last retained index.

        Skipped entirely (the source is not read) when the manifest already
        exists; the count is then taken from the manifest.
        """
        if self.is_extracted():
            logger.info("Skip extraction: %s already exists", self.manifest.path)
            try:
                return self.manifest.last_index() or 0
            except (OSError, ValueError) as exc:
                raise FilesystemError(f"Cannot read manifest {self.manifest.path}: {exc}") from exc

        count = 0
        written = 0
        last = 0
        current_slice = None
        with self.manifest.open_for_append() as manifest_file:
            for record in source.records():
                count += 1
                if self._excluded(count):
                    logger.debug("Extracting %d (%s): skip", count, record.identifier)
                    continue

                slice_no = slice_of(count, self.slice_size)
                slice_dir = self.input_dir / str(slice_no)
                try:
                    if slice_no != current_slice:
                        slice_dir.mkdir(parents=True, exist_ok=True)
                        current_slice = slice_no
                    (slice_dir / str(count)).write_bytes(record.raw)
                    manifest_file.write(Manifest.format_row(count, record.identifier))
                except OSError as exc:
                    raise FilesystemError(
                        f"Cannot write record {count} ({record.identifier}): {exc}"
                    ) from exc
                written += 1
                last = count
                logger.debug("Extracting %d (%s): done", count, record.identifier)

        logger.info(
            "Extracted %d of %d records into %s", written, count, self.input_dir,
        )
        return last

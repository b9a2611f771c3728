from collections.abc import Iterator

from sgearray.errors import SourceError
from sgearray.models import Record

from .base import Launcher, RecordSource


class MockRecordSource(RecordSource):
    def __init__(self, records: list[Record] | None = None, fail_after: int | None = None):
        self._records = list(records or [])
        self.fail_after = fail_after
        self.reads = 0

    @classmethod
    def from_ids(cls, *identifiers: str, fail_after: int | None = None) -> "MockRecordSource":
        records = [Record(identifier=i, raw=f">{i}\nACGT\n".encode()) for i in identifiers]
        return cls(records, fail_after=fail_after)

    def records(self) -> Iterator[Record]:
        self.reads += 1
        for n, record in enumerate(self._records):
            if self.fail_after is not None and n >= self.fail_after:
                raise SourceError(f"mock source failed after {n} records")
            yield record


class MockLauncher(Launcher):
    def __init__(self, returncodes: list[int] | None = None):
        self.calls: list[list[str]] = []
        self.returncodes = list(returncodes or [])
        self._next_job_id = 12345

    async def launch(self, argv: list[str]) -> tuple[int, str, str]:
        self.calls.append(list(argv))
        rc = self.returncodes.pop(0) if self.returncodes else 0
        if rc != 0:
            return (rc, "", "Unable to run job: denied\n")
        job_id = self._next_job_id
        self._next_job_id += 1
        return (0, f"Your job-array {job_id} has been submitted\n", "")

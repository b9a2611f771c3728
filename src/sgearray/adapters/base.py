from abc import ABC, abstractmethod
from collections.abc import Iterator

from sgearray.models import Record


class RecordSource(ABC):
    @abstractmethod
    def records(self) -> Iterator[Record]:
        """Yield records in source order. Raises SourceError on bad input."""


class Launcher(ABC):
    @abstractmethod
    async def launch(self, argv: list[str]) -> tuple[int, str, str]:
        """Run a command. Returns (returncode, stdout, stderr)."""

"""Exception taxonomy for preparation and submission of array jobs.

Per-chunk launcher failures are not exceptions: they are reported as
``ChunkResult`` entries with ``ChunkStatus.FAILED`` so the remaining
chunks still get submitted.
"""


class SgeArrayError(Exception):
    """Base class for all sgearray errors."""


class ConfigError(SgeArrayError, ValueError):
    """Required configuration (command, query) is missing or invalid."""


class SourceError(SgeArrayError):
    """The record source could not be opened or decoded."""


class FilesystemError(SgeArrayError, OSError):
    """A directory or file could not be created, written or removed."""


class SubmissionError(SgeArrayError):
    """The total task count could not be resolved from the manifest."""

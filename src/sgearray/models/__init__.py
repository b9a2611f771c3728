from .enums import ChunkStatus, FlatFileFormat
from .job import Chunk, ChunkResult, JobConfig, WorkerScriptParams
from .record import Record

__all__ = [
    "Chunk",
    "ChunkResult",
    "ChunkStatus",
    "FlatFileFormat",
    "JobConfig",
    "Record",
    "WorkerScriptParams",
]

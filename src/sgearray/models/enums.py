from enum import Enum


class ChunkStatus(str, Enum):
    SUBMITTED = "submitted"
    FAILED = "failed"
    DRY_RUN = "dry_run"


class FlatFileFormat(str, Enum):
    FASTA = "fasta"
    ENTRY = "entry"  # "//"-terminated entries (GenBank, EMBL, UniProt, KEGG)

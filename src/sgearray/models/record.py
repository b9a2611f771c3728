from dataclasses import dataclass


@dataclass(frozen=True)
class Record:
    """One entry of a flatfile: its identifier and its serialized form."""
    identifier: str
    raw: bytes

"""Slicer: pure numbering of task indices into bounded subdirectories."""

from __future__ import annotations

from pathlib import Path


def slice_of(index: int, slice_size: int) -> int:
    """Return the 1-based slice holding the 1-based ``index``.

    Indices 1..slice_size map to slice 1, slice_size+1..2*slice_size to 2, etc.
    """
    return (index - 1) // slice_size + 1


def slice_path(root: str | Path, index: int, slice_size: int) -> Path:
    """Return ``root/<slice>/<index>``."""
    return Path(root) / str(slice_of(index, slice_size)) / str(index)

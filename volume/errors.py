"""Error kinds shared by the voxel data model and the compressor."""
from __future__ import annotations


class OutOfRange(IndexError):
    """A window or cell access fell outside its declared bounds."""


class InvariantViolation(RuntimeError):
    """Internal state desynchronised; the run cannot continue."""

"""Function call tracking used throughout the code base."""

from .runtime import configure, counts_file, is_persisting, reset, snapshot, t

__all__ = ["t", "snapshot", "reset", "configure", "is_persisting", "counts_file"]

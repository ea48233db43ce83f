"""Utility modules for the money kernel."""

from money_kernel.utils.rwlock import ReadWriteLock

__all__ = [
    "ReadWriteLock",
]

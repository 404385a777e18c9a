"""
Adapters package
----------------

Storage abstraction so that the chart gallery can read its input tables
and write frames/GIFs both locally (filesystem) and in the cloud (S3)
using the same rendering logic.
"""

from .storage import (  # noqa: F401
    LocalStorageAdapter,
    S3StorageAdapter,
    StorageAdapter,
)

__all__ = [
    "StorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
]

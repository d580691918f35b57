"""Filesystem-style adapter for S3-compatible object storage (Huawei OBS)."""

from obs_storage.storage import Filesystem, ObsAdapter, StorageAdapter, Visibility

__all__ = ["Filesystem", "ObsAdapter", "StorageAdapter", "Visibility"]

__version__ = "0.1.0"

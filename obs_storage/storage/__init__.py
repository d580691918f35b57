"""Storage abstraction layer for object storage operations."""

from obs_storage.storage.adapter import StorageAdapter
from obs_storage.storage.filesystem import Filesystem
from obs_storage.storage.obs_adapter import ObsAdapter
from obs_storage.storage.options import MetaOption, WriteConfig
from obs_storage.storage.visibility import Visibility

__all__ = ["StorageAdapter", "ObsAdapter", "Filesystem", "MetaOption", "Visibility", "WriteConfig"]

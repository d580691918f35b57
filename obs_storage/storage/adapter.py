"""Abstract storage adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, List, Union

from obs_storage.storage.options import WriteConfig
from obs_storage.storage.visibility import Visibility

Record = Dict[str, Any]
Result = Union[Record, bool]


class StorageAdapter(ABC):
    """
    Abstract interface for filesystem-style storage operations.

    Operations never raise on backend failure: they return a record
    (``dict``) or ``True`` on success and ``False`` otherwise.
    """

    path_prefix: str = ""
    path_separator: str = "/"

    def set_path_prefix(self, prefix: str | None) -> None:
        prefix = (prefix or "").strip("\\/")
        self.path_prefix = prefix + self.path_separator if prefix else ""

    def get_path_prefix(self) -> str:
        return self.path_prefix

    def apply_path_prefix(self, path: str) -> str:
        return self.path_prefix + path.lstrip("\\/")

    def remove_path_prefix(self, path: str) -> str:
        if self.path_prefix and path.startswith(self.path_prefix):
            return path[len(self.path_prefix):]
        return path

    @abstractmethod
    def write(self, path: str, contents: bytes | str, config: WriteConfig) -> Result:
        """
        Write a new file.

        Args:
            path: Logical path (e.g., "uploads/report.pdf")
            contents: File contents
            config: Per-call settings (visibility, mimetype, meta options)

        Returns:
            File record, or False on failure
        """
        pass

    @abstractmethod
    def write_stream(self, path: str, stream: BinaryIO, config: WriteConfig) -> Result:
        """Write a new file from a readable binary stream."""
        pass

    @abstractmethod
    def update(self, path: str, contents: bytes | str, config: WriteConfig) -> Result:
        """Overwrite an existing file."""
        pass

    @abstractmethod
    def update_stream(self, path: str, stream: BinaryIO, config: WriteConfig) -> Result:
        """Overwrite an existing file from a readable binary stream."""
        pass

    @abstractmethod
    def rename(self, path: str, newpath: str) -> bool:
        """
        Move a file.

        Returns:
            True if the file now lives at ``newpath`` only
        """
        pass

    @abstractmethod
    def copy(self, path: str, newpath: str) -> bool:
        pass

    @abstractmethod
    def delete(self, path: str) -> bool:
        pass

    @abstractmethod
    def delete_dir(self, dirname: str) -> bool:
        pass

    @abstractmethod
    def create_dir(self, dirname: str, config: WriteConfig) -> Result:
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: Visibility | str) -> Result:
        pass

    @abstractmethod
    def has(self, path: str) -> bool:
        pass

    @abstractmethod
    def read(self, path: str) -> Result:
        """
        Read file contents.

        Returns:
            Record with ``contents`` as bytes, or False on failure
        """
        pass

    @abstractmethod
    def read_stream(self, path: str) -> Result:
        """
        Open file contents for lazy consumption.

        Returns:
            Record with a readable ``stream``, or False on failure
        """
        pass

    @abstractmethod
    def list_contents(self, directory: str = "", recursive: bool = False) -> List[Record]:
        pass

    @abstractmethod
    def get_metadata(self, path: str) -> Result:
        pass

    @abstractmethod
    def get_size(self, path: str) -> Result:
        pass

    @abstractmethod
    def get_mimetype(self, path: str) -> Result:
        pass

    @abstractmethod
    def get_timestamp(self, path: str) -> Result:
        pass

    @abstractmethod
    def get_visibility(self, path: str) -> Result:
        pass

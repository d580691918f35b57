"""Filesystem facade over a storage adapter."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, BinaryIO, List, Mapping, Optional

from obs_storage.storage.adapter import Record, Result, StorageAdapter
from obs_storage.storage.options import WriteConfig


def normalize_path(path: str) -> str:
    """
    Normalize a logical path.

    Leading and trailing slashes are dropped, "." segments and empty
    segments removed, and ".." resolved against its parent.

    Raises:
        ValueError: If ".." climbs above the root
    """
    parts: List[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                raise ValueError(f"Path is outside of the defined root: {path}")
            parts.pop()
            continue
        parts.append(segment)
    return "/".join(parts)


class Filesystem:
    """Path-normalizing front end that layers per-call settings over defaults."""

    def __init__(self, adapter: StorageAdapter, config: WriteConfig | Mapping | None = None):
        self.adapter = adapter
        self.config = WriteConfig.ensure(config)

    def get_adapter(self) -> StorageAdapter:
        return self.adapter

    def _prepare_config(self, settings: WriteConfig | Mapping | None) -> WriteConfig:
        config = WriteConfig(WriteConfig.ensure(settings).to_dict())
        return config.set_fallback(self.config)

    def has(self, path: str) -> bool:
        path = normalize_path(path)
        return bool(path) and self.adapter.has(path)

    def write(self, path: str, contents: bytes | str, config: WriteConfig | Mapping | None = None) -> Result:
        return self.adapter.write(normalize_path(path), contents, self._prepare_config(config))

    def write_stream(self, path: str, stream: BinaryIO, config: WriteConfig | Mapping | None = None) -> Result:
        return self.adapter.write_stream(normalize_path(path), stream, self._prepare_config(config))

    def update(self, path: str, contents: bytes | str, config: WriteConfig | Mapping | None = None) -> Result:
        return self.adapter.update(normalize_path(path), contents, self._prepare_config(config))

    def update_stream(self, path: str, stream: BinaryIO, config: WriteConfig | Mapping | None = None) -> Result:
        return self.adapter.update_stream(normalize_path(path), stream, self._prepare_config(config))

    def put(self, path: str, contents: bytes | str, config: WriteConfig | Mapping | None = None) -> Result:
        """Write or overwrite, whichever applies."""
        path = normalize_path(path)
        config = self._prepare_config(config)
        if self.adapter.has(path):
            return self.adapter.update(path, contents, config)
        return self.adapter.write(path, contents, config)

    def read(self, path: str) -> bytes | bool:
        result = self.adapter.read(normalize_path(path))
        if result is False:
            return False
        return result["contents"]

    def read_stream(self, path: str) -> Any:
        result = self.adapter.read_stream(normalize_path(path))
        if result is False:
            return False
        return result["stream"]

    def read_and_delete(self, path: str) -> bytes | bool:
        path = normalize_path(path)
        contents = self.read(path)
        if contents is False:
            return False
        self.delete(path)
        return contents

    def copy(self, path: str, newpath: str) -> bool:
        return self.adapter.copy(normalize_path(path), normalize_path(newpath))

    def rename(self, path: str, newpath: str) -> bool:
        return self.adapter.rename(normalize_path(path), normalize_path(newpath))

    def delete(self, path: str) -> bool:
        return self.adapter.delete(normalize_path(path))

    def delete_dir(self, dirname: str) -> bool:
        dirname = normalize_path(dirname)
        if not dirname:
            raise ValueError("Root directories can not be deleted")
        return self.adapter.delete_dir(dirname)

    def create_dir(self, dirname: str, config: WriteConfig | Mapping | None = None) -> bool:
        result = self.adapter.create_dir(normalize_path(dirname), self._prepare_config(config))
        return result is not False

    def list_contents(self, directory: str = "", recursive: bool = False) -> List[Record]:
        return self.adapter.list_contents(normalize_path(directory), recursive)

    def get_metadata(self, path: str) -> Result:
        return self.adapter.get_metadata(normalize_path(path))

    def get_mimetype(self, path: str) -> str | bool:
        return self._metadata_field(self.adapter.get_mimetype(normalize_path(path)), "mimetype")

    def get_timestamp(self, path: str) -> int | bool:
        return self._metadata_field(self.adapter.get_timestamp(normalize_path(path)), "timestamp")

    def get_size(self, path: str) -> int | bool:
        return self._metadata_field(self.adapter.get_size(normalize_path(path)), "size")

    def get_visibility(self, path: str) -> str | bool:
        return self._metadata_field(self.adapter.get_visibility(normalize_path(path)), "visibility")

    def set_visibility(self, path: str, visibility: str) -> bool:
        return self.adapter.set_visibility(normalize_path(path), visibility) is not False

    @staticmethod
    def _metadata_field(result: Result, field: str) -> Any:
        if result is False or field not in result:
            return False
        return result[field]

    def bucket(self, bucket: str) -> "Filesystem":
        """Point the underlying adapter at another bucket."""
        self.adapter.set_bucket(bucket)
        return self

    def get_url(self, path: str) -> str:
        return self.adapter.get_url(normalize_path(path))

    def sign_url(
        self,
        path: str,
        expiration: datetime | timedelta | int,
        options: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
    ) -> str | bool:
        return self.adapter.sign_url(normalize_path(path), expiration, options, method)

    def temporary_url(
        self,
        path: str,
        expiration: datetime | timedelta | int,
        options: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
    ) -> str | bool:
        return self.adapter.get_temporary_url(normalize_path(path), expiration, options, method)

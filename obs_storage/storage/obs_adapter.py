"""Huawei OBS storage adapter using the S3-compatible API."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Any, BinaryIO, Dict, List, Mapping, Optional
from urllib.parse import urlsplit, urlunsplit

from botocore.exceptions import BotoCoreError, ClientError

from obs_storage.core.errors import NotFoundError, translate_error
from obs_storage.storage.adapter import Record, Result, StorageAdapter
from obs_storage.storage.options import MetaOption, WriteConfig
from obs_storage.storage.visibility import (
    Visibility,
    normalize_visibility,
    visibility_from_grants,
)

VENDOR_ERRORS = (ClientError, BotoCoreError)

DELIMITER = "/"
MAX_KEYS = 1000

# HTTP method -> boto3 client method for presigned URLs
SIGNABLE_METHODS = {
    "GET": "get_object",
    "PUT": "put_object",
    "HEAD": "head_object",
    "DELETE": "delete_object",
}


def concat_path_to_url(url: str, path: str) -> str:
    return url.rstrip("/") + "/" + path.lstrip("/")


def replace_base_url(url: str, base_url: str) -> str:
    """Swap scheme, host and port of ``url`` for those of ``base_url``."""
    parts = urlsplit(url)
    base = urlsplit(base_url)
    # Keep host and port as written (IPv6 brackets, case), minus any userinfo
    netloc = base.netloc.rpartition("@")[2]
    return urlunsplit((base.scheme, netloc, parts.path, parts.query, parts.fragment))


def _to_timestamp(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return int(value.timestamp())
    return int(value)


class ObsAdapter(StorageAdapter):
    """Storage adapter for Huawei OBS (S3-compatible)."""

    def __init__(
        self,
        client: Any,
        endpoint: str,
        bucket: str,
        prefix: str = "",
        options: Optional[Mapping[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize OBS storage adapter.

        Args:
            client: boto3 S3 client pointed at the OBS endpoint
            endpoint: OBS endpoint (e.g., "obs.cn-east-3.myhuaweicloud.com")
            bucket: Bucket name
            prefix: Path prefix applied to every key
            options: Adapter-wide options ("url", "bucket_endpoint",
                "temporary_url") and write defaults ("visibility",
                "mimetype", meta options)
            logger: Logger for failed vendor calls
        """
        self.client = client
        self.endpoint = endpoint
        self.bucket = bucket
        self.options: Dict[str, Any] = dict(options or {})
        self.logger = logger or logging.getLogger(__name__)
        self.set_path_prefix(prefix)

    def get_bucket(self) -> str:
        return self.bucket

    def set_bucket(self, bucket: str) -> None:
        self.bucket = bucket

    def get_client(self) -> Any:
        return self.client

    def _failed(self, operation: str, key: str, error: Exception) -> bool:
        translated = translate_error(error, key)
        # Missing keys are routine for existence checks
        level = logging.DEBUG if isinstance(translated, NotFoundError) else logging.WARNING
        self.logger.log(
            level,
            f"[ObsAdapter] {operation} failed for {key}: {error}",
            extra={"obs_bucket": self.bucket, "obs_key": key, "obs_error_type": translated.error_type},
        )
        return False

    def write(self, path: str, contents: bytes | str, config: WriteConfig | Mapping | None = None) -> Result:
        key = self.apply_path_prefix(path)
        config = self._merge_config(config)
        options = self.get_options_from_config(config)

        if contents is None:
            contents = b""
        elif isinstance(contents, str):
            contents = contents.encode("utf-8")

        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=contents, **options)
        except VENDOR_ERRORS as exc:
            return self._failed("put_object", key, exc)

        self.logger.debug(f"[ObsAdapter] Wrote {len(contents)} bytes to {key}")
        record: Record = {"type": "file", "path": path, "size": len(contents)}
        visibility = config.get("visibility")
        if visibility:
            record["visibility"] = normalize_visibility(visibility).value
        if options.get("ContentType"):
            record["mimetype"] = options["ContentType"]
        return record

    def write_stream(self, path: str, stream: BinaryIO, config: WriteConfig | Mapping | None = None) -> Result:
        # Buffered in memory; no multipart upload
        contents = stream.read()
        return self.write(path, contents, config)

    def update(self, path: str, contents: bytes | str, config: WriteConfig | Mapping | None = None) -> Result:
        return self.write(path, contents, config)

    def update_stream(self, path: str, stream: BinaryIO, config: WriteConfig | Mapping | None = None) -> Result:
        return self.write_stream(path, stream, config)

    def rename(self, path: str, newpath: str) -> bool:
        if not self.copy(path, newpath):
            return False
        return self.delete(path)

    def copy(self, path: str, newpath: str) -> bool:
        key = self.apply_path_prefix(path)
        new_key = self.apply_path_prefix(newpath)

        try:
            self.client.copy_object(
                Bucket=self.bucket,
                Key=new_key,
                CopySource={"Bucket": self.bucket, "Key": key},
                MetadataDirective="COPY",
            )
        except VENDOR_ERRORS as exc:
            return self._failed("copy_object", key, exc)

        return True

    def delete(self, path: str) -> bool:
        key = self.apply_path_prefix(path)

        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except VENDOR_ERRORS as exc:
            return self._failed("delete_object", key, exc)

        return not self.has(path)

    def delete_dir(self, dirname: str) -> bool:
        for entry in self.list_contents(dirname, True):
            if entry["type"] == "dir":
                self.delete(entry["path"] + "/")
            else:
                self.delete(entry["path"])

        return not self.has(dirname.strip("/") + "/")

    def create_dir(self, dirname: str, config: WriteConfig | Mapping | None = None) -> Result:
        marker = dirname.strip("/") + "/"
        if self.write(marker, b"", config) is False:
            return False
        return {"type": "dir", "path": dirname.strip("/")}

    def set_visibility(self, path: str, visibility: Visibility | str) -> Result:
        key = self.apply_path_prefix(path)
        visibility = normalize_visibility(visibility)

        try:
            self.client.put_object_acl(Bucket=self.bucket, Key=key, ACL=visibility.to_acl())
        except VENDOR_ERRORS as exc:
            return self._failed("put_object_acl", key, exc)

        return {"path": path, "visibility": visibility.value}

    def get_visibility(self, path: str) -> Result:
        key = self.apply_path_prefix(path)

        try:
            response = self.client.get_object_acl(Bucket=self.bucket, Key=key)
        except VENDOR_ERRORS as exc:
            return self._failed("get_object_acl", key, exc)

        visibility = visibility_from_grants(response.get("Grants", []))
        return {"path": path, "visibility": visibility.value}

    def has(self, path: str) -> bool:
        return self.get_metadata(path) is not False

    def read(self, path: str) -> Result:
        try:
            contents = self._get_object(path).read()
        except VENDOR_ERRORS as exc:
            return self._failed("get_object", self.apply_path_prefix(path), exc)

        return {"type": "file", "path": path, "contents": contents}

    def read_stream(self, path: str) -> Result:
        try:
            stream = self._get_object(path)
        except VENDOR_ERRORS as exc:
            return self._failed("get_object", self.apply_path_prefix(path), exc)

        return {"type": "file", "path": path, "stream": stream}

    def _get_object(self, path: str) -> Any:
        key = self.apply_path_prefix(path)
        response = self.client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"]

    def list_contents(self, directory: str = "", recursive: bool = False) -> List[Record]:
        dirname = self.apply_path_prefix(directory)
        if dirname and not dirname.endswith(DELIMITER):
            dirname += DELIMITER

        try:
            listing = self.list_dir_objects(dirname, recursive)
        except VENDOR_ERRORS as exc:
            self._failed("list_objects", dirname, exc)
            return []

        contents: List[Record] = []
        for obj in listing["objects"]:
            metadata = self.get_metadata(self.remove_path_prefix(obj["Key"]))
            if metadata is False:
                continue
            contents.append(metadata)

        for prefix in listing["prefixes"]:
            contents.append({"type": "dir", "path": self.remove_path_prefix(prefix).rstrip(DELIMITER)})

        return contents

    def list_dir_objects(self, dirname: str = "", recursive: bool = False) -> Dict[str, List[Any]]:
        """
        Page through a delimiter listing of ``dirname``.

        Args:
            dirname: Full key prefix (adapter prefix already applied)
            recursive: Descend into common prefixes depth-first

        Returns:
            Dict with "objects" (raw listing entries) and "prefixes"
            (common prefixes directly under ``dirname``)

        Raises:
            ClientError, BotoCoreError: If any listing page fails
        """
        objects: List[Dict[str, Any]] = []
        prefixes: List[str] = []

        paginator = self.client.get_paginator("list_objects")
        pages = paginator.paginate(
            Bucket=self.bucket,
            Prefix=dirname,
            Delimiter=DELIMITER,
            PaginationConfig={"PageSize": MAX_KEYS},
        )
        for page in pages:
            for obj in page.get("Contents", []):
                objects.append(dict(obj, Prefix=dirname))
            for common_prefix in page.get("CommonPrefixes", []):
                prefixes.append(common_prefix["Prefix"])

        if recursive:
            for prefix in prefixes:
                objects.extend(self.list_dir_objects(prefix, recursive)["objects"])

        return {"objects": objects, "prefixes": prefixes}

    def get_metadata(self, path: str) -> Result:
        key = self.apply_path_prefix(path)

        try:
            metadata = self.client.head_object(Bucket=self.bucket, Key=key)
        except VENDOR_ERRORS as exc:
            return self._failed("head_object", key, exc)

        relative = self.remove_path_prefix(key)
        if relative.endswith(DELIMITER):
            return {"type": "dir", "path": relative.rstrip(DELIMITER)}

        return {
            "type": "file",
            "mimetype": metadata.get("ContentType"),
            "path": relative,
            "timestamp": _to_timestamp(metadata.get("LastModified")),
            "size": metadata.get("ContentLength"),
        }

    def get_size(self, path: str) -> Result:
        return self.get_metadata(path)

    def get_mimetype(self, path: str) -> Result:
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Result:
        return self.get_metadata(path)

    def get_url(self, path: str) -> str:
        key = self.apply_path_prefix(path)

        if self.options.get("url"):
            return concat_path_to_url(self.options["url"], key)

        return self.normalize_host() + key.lstrip("/")

    def normalize_host(self) -> str:
        endpoint = self.endpoint
        if not endpoint.startswith("http"):
            endpoint = "https://" + endpoint
        parsed = urlsplit(endpoint)
        domain = parsed.netloc
        if not self.options.get("bucket_endpoint", False):
            domain = f"{self.bucket}.{domain}"
        return f"{parsed.scheme}://{domain}".rstrip("/") + "/"

    def sign_url(
        self,
        path: str,
        expiration: datetime | timedelta | int,
        options: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
    ) -> str | bool:
        """
        Create a presigned URL for ``path``.

        Args:
            path: Logical path
            expiration: Absolute expiry time, or a lifetime in seconds
            options: Extra request parameters (e.g., "ResponseContentType")
            method: HTTP method the URL is valid for

        Returns:
            Signed URL, or False on failure
        """
        if isinstance(expiration, datetime):
            expires = int(expiration.timestamp() - time.time())
        elif isinstance(expiration, timedelta):
            expires = int(expiration.total_seconds())
        else:
            expires = int(expiration)
        key = self.apply_path_prefix(path)

        http_method = method.upper()
        client_method = SIGNABLE_METHODS.get(http_method)
        if client_method is None:
            self.logger.warning(f"[ObsAdapter] Cannot sign {http_method} request for {key}")
            return False

        params: Dict[str, Any] = {"Bucket": self.bucket, "Key": key}
        params.update(options or {})

        try:
            return self.client.generate_presigned_url(
                client_method,
                Params=params,
                ExpiresIn=expires,
                HttpMethod=http_method,
            )
        except VENDOR_ERRORS as exc:
            return self._failed("generate_presigned_url", key, exc)

    def get_temporary_url(
        self,
        path: str,
        expiration: datetime | timedelta | int,
        options: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
    ) -> str | bool:
        url = self.sign_url(path, expiration, options, method)
        if url is False:
            return False

        base_url = self.options.get("temporary_url")
        if base_url:
            url = replace_base_url(url, base_url)

        return url

    def _merge_config(self, config: WriteConfig | Mapping | None) -> WriteConfig:
        merged = WriteConfig(WriteConfig.ensure(config).to_dict())
        return merged.set_fallback(WriteConfig(self.options))

    def get_options_from_config(self, config: WriteConfig) -> Dict[str, Any]:
        """Translate write settings into put_object parameters."""
        options: Dict[str, Any] = {}

        visibility = config.get("visibility")
        if visibility:
            options["ACL"] = normalize_visibility(visibility).to_acl()

        mimetype = config.get("mimetype")
        if mimetype:
            options["ContentType"] = mimetype

        for option in MetaOption:
            if not config.has(option.value):
                continue
            options[option.value] = config.get(option.value)

        return options

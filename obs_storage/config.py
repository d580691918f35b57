import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
from urllib.parse import urlsplit

from dotenv import load_dotenv

from obs_storage.storage.visibility import Visibility

TRUE_VALUES = ("true", "1", "yes")


def _load_dotenv_if_available() -> None:
    # Prefer the .env next to the package, then the cwd-based default
    env_path = Path(__file__).resolve().parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)
    load_dotenv(override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in TRUE_VALUES


@dataclass(frozen=True)
class Config:
    # Object storage
    endpoint: str
    bucket: str
    access_key_id: str | None = None
    secret_access_key: str | None = None
    region: str | None = None
    path_prefix: str = ""

    # Public URLs
    url: str | None = None
    bucket_endpoint: bool = False
    temporary_url: str | None = None

    # Write defaults
    default_visibility: str | None = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file_path: str | None = None

    def validate(self) -> None:
        if not self.endpoint:
            raise ValueError("OBS_ENDPOINT is required")

        if not self.bucket:
            raise ValueError("OBS_BUCKET is required")

        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise ValueError("OBS_ACCESS_KEY_ID and OBS_SECRET_ACCESS_KEY must be set together")

        for name, value in (("OBS_URL", self.url), ("OBS_TEMPORARY_URL", self.temporary_url)):
            if value and not urlsplit(value).scheme:
                raise ValueError(f"{name} must include a scheme (e.g. 'https://')")

        if self.default_visibility is not None:
            try:
                Visibility.parse(self.default_visibility)
            except ValueError as exc:
                raise ValueError("OBS_DEFAULT_VISIBILITY must be 'public' or 'private'") from exc

        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR, or CRITICAL")

        if self.log_format not in {"json", "text"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")

        if self.log_file_path:
            log_dir = Path(self.log_file_path).parent
            if not log_dir.exists():
                raise ValueError(f"LOG_FILE_PATH directory does not exist: {log_dir}")

    def get_endpoint_url(self) -> str:
        if self.endpoint.startswith("http"):
            return self.endpoint
        return f"https://{self.endpoint}"

    def adapter_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"bucket_endpoint": self.bucket_endpoint}
        if self.url:
            options["url"] = self.url
        if self.temporary_url:
            options["temporary_url"] = self.temporary_url
        if self.default_visibility:
            options["visibility"] = Visibility.parse(self.default_visibility).value
        return options

    def create_client(self):
        """
        Create a boto3 S3 client for the OBS endpoint.

        Returns:
            botocore client using virtual-hosted addressing
        """
        import boto3
        from botocore.config import Config as BotoConfig

        return boto3.client(
            "s3",
            endpoint_url=self.get_endpoint_url(),
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            region_name=self.region,
            config=BotoConfig(s3={"addressing_style": "virtual"}),
        )

    def create_adapter(self, client=None):
        """
        Create storage adapter based on configuration.

        Args:
            client: Existing boto3 client; built from this config if omitted

        Returns:
            ObsAdapter instance
        """
        from obs_storage.core.logging import setup_logger
        from obs_storage.storage import ObsAdapter

        return ObsAdapter(
            client=client if client is not None else self.create_client(),
            endpoint=self.endpoint,
            bucket=self.bucket,
            prefix=self.path_prefix,
            options=self.adapter_options(),
            logger=setup_logger("obs_storage", self),
        )

    def create_filesystem(self, client=None):
        from obs_storage.storage import Filesystem

        return Filesystem(self.create_adapter(client))


def load_config() -> Config:
    _load_dotenv_if_available()

    config = Config(
        endpoint=os.environ.get("OBS_ENDPOINT", "").strip(),
        bucket=os.environ.get("OBS_BUCKET", "").strip(),
        access_key_id=os.environ.get("OBS_ACCESS_KEY_ID"),
        secret_access_key=os.environ.get("OBS_SECRET_ACCESS_KEY"),
        region=os.environ.get("OBS_REGION"),
        path_prefix=os.environ.get("OBS_PREFIX", ""),
        url=os.environ.get("OBS_URL"),
        bucket_endpoint=_env_flag("OBS_BUCKET_ENDPOINT"),
        temporary_url=os.environ.get("OBS_TEMPORARY_URL"),
        default_visibility=os.environ.get("OBS_DEFAULT_VISIBILITY"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
        log_file_path=os.environ.get("LOG_FILE_PATH"),
    )

    config.validate()
    return config

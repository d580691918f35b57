"""Write options: per-call settings layered over adapter-wide defaults."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional


class MetaOption(str, Enum):
    """Request parameters passed through to the object store verbatim."""

    ACL = "ACL"
    EXPIRES = "Expires"
    STORAGE_CLASS = "StorageClass"


class WriteConfig:
    """Settings lookup with an optional fallback layer."""

    def __init__(self, settings: Optional[Mapping[str, Any]] = None):
        self.settings: Dict[str, Any] = dict(settings or {})
        self.fallback: Optional[WriteConfig] = None

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.settings:
            return self.settings[key]
        if self.fallback is not None:
            return self.fallback.get(key, default)
        return default

    def has(self, key: str) -> bool:
        if key in self.settings:
            return True
        return self.fallback is not None and self.fallback.has(key)

    def set_fallback(self, fallback: Optional["WriteConfig"]) -> "WriteConfig":
        self.fallback = fallback
        return self

    def to_dict(self) -> Dict[str, Any]:
        merged = self.fallback.to_dict() if self.fallback is not None else {}
        merged.update(self.settings)
        return merged

    @classmethod
    def ensure(cls, config: "WriteConfig | Mapping[str, Any] | None") -> "WriteConfig":
        if isinstance(config, WriteConfig):
            return config
        return cls(config)

    def __repr__(self) -> str:
        return f"WriteConfig({self.to_dict()!r})"

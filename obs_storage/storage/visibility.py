"""Public/private visibility and its mapping onto object ACLs."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping

PUBLIC_GRANT_URI = "http://acs.amazonaws.com/groups/global/AllUsers"
READ_PERMISSION = "READ"

ACL_PUBLIC_READ = "public-read"
ACL_PRIVATE = "private"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: "Visibility | str") -> "Visibility":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise ValueError(f"Unknown visibility: {value!r}") from exc

    def to_acl(self) -> str:
        return ACL_PUBLIC_READ if self is Visibility.PUBLIC else ACL_PRIVATE


def visibility_from_grants(grants: Iterable[Mapping[str, Any]]) -> Visibility:
    """Public iff the "all users" group holds READ on the object."""
    for grant in grants:
        grantee = grant.get("Grantee") or {}
        if grantee.get("URI") != PUBLIC_GRANT_URI:
            continue
        if grant.get("Permission") != READ_PERMISSION:
            continue
        return Visibility.PUBLIC
    return Visibility.PRIVATE


def normalize_visibility(value: "Visibility | str") -> Visibility:
    """Anything other than public is treated as private."""
    if isinstance(value, Visibility):
        return value
    if str(value).lower() == Visibility.PUBLIC.value:
        return Visibility.PUBLIC
    return Visibility.PRIVATE

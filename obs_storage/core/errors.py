from __future__ import annotations

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)


class StorageError(Exception):
    error_type = "UNKNOWN"


class NotFoundError(StorageError):
    error_type = "NOT_FOUND"


class PermanentError(StorageError):
    error_type = "PERMANENT"


class RetryableError(StorageError):
    error_type = "RETRYABLE"


NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NoSuchBucket", "NotFound"})
PERMANENT_CODES = frozenset(
    {
        "403",
        "AccessDenied",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "InvalidArgument",
        "InvalidBucketName",
        "MethodNotAllowed",
    }
)


def client_error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def classify_error(error: Exception) -> str:
    if hasattr(error, "error_type"):
        return getattr(error, "error_type")

    if isinstance(error, ClientError):
        code = client_error_code(error)
        if code in NOT_FOUND_CODES:
            return NotFoundError.error_type
        if code in PERMANENT_CODES:
            return PermanentError.error_type
        return RetryableError.error_type

    if isinstance(error, NoCredentialsError):
        return PermanentError.error_type

    if isinstance(error, (EndpointConnectionError, BotoConnectionError, ReadTimeoutError)):
        return RetryableError.error_type

    message = str(error).lower()

    if "not found" in message or "no such" in message:
        return NotFoundError.error_type

    if "permission" in message or "denied" in message or "credentials" in message:
        return PermanentError.error_type

    if "connection" in message or "timeout" in message or "timed out" in message:
        return RetryableError.error_type

    if isinstance(error, BotoCoreError):
        return RetryableError.error_type

    return StorageError.error_type


_ERROR_CLASSES = {
    NotFoundError.error_type: NotFoundError,
    PermanentError.error_type: PermanentError,
    RetryableError.error_type: RetryableError,
}


def translate_error(error: Exception, key: str = "") -> StorageError:
    """Wrap a vendor exception into the matching tagged storage error."""
    if isinstance(error, StorageError):
        return error
    error_class = _ERROR_CLASSES.get(classify_error(error), StorageError)
    message = f"{error_class.__name__} for {key}: {error}" if key else str(error)
    translated = error_class(message)
    translated.__cause__ = error
    return translated

"""S3 Event Inspector exception hierarchy."""

from typing import Optional


class InspectorError(Exception):
    """Base exception for all runtime errors raised by the inspector."""


class DecodeError(InspectorError):
    """A notification payload was malformed or missing a required field."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class FetchError(InspectorError):
    """Retrieving an object from S3 failed."""

    def __init__(self, bucket: str, key: str, cause: Optional[BaseException] = None) -> None:
        self.bucket = bucket
        self.key = key
        self.cause = cause
        super().__init__(f"failed to download S3 object {bucket}/{key}: {cause}")


class ReceiveError(InspectorError):
    """The SQS receive call failed."""


class DeleteError(InspectorError):
    """The SQS delete call failed; the message will be redelivered."""

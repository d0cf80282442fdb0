"""
Data models for the S3 Event Inspector.

This module defines the core data structures used to pass information between
different parts of the application. The wire schema for S3 event notifications
is expressed as pydantic models so that a message body is validated in a single
parse step; the in-process contracts are plain dataclasses and TypedDicts.
"""

from dataclasses import dataclass
from typing import Any, List, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawMessage(TypedDict):
    """
    Represents a single message entry from an SQS `ReceiveMessage` response.

    Only the attributes used by the consumer are declared. The receipt handle
    is tied to this specific delivery and is the only way to delete it.
    """

    MessageId: str
    ReceiptHandle: str
    Body: str


# --- Wire schema for S3 event notifications ---


class _StrictModel(BaseModel):
    model_config = ConfigDict(strict=True)


class S3Bucket(_StrictModel):
    name: str = Field(min_length=1)


class S3Object(_StrictModel):
    key: str = Field(min_length=1)


class S3Entity(_StrictModel):
    bucket: S3Bucket
    object_: S3Object = Field(alias="object")


class S3EventRecord(_StrictModel):
    s3: S3Entity


class S3EventNotification(_StrictModel):
    """
    The body of an S3 event notification as delivered through SQS.

    Only the first entry of `Records` is validated and consumed. S3 may batch
    several records into one message; the remaining records are dropped here
    so that a malformed trailing record cannot reject the first one.
    """

    records: List[S3EventRecord] = Field(alias="Records", min_length=1)

    @field_validator("records", mode="before")
    @classmethod
    def _first_record_only(cls, value: Any) -> Any:
        if isinstance(value, list):
            return value[:1]
        return value


# --- In-process contracts ---


@dataclass(frozen=True)
class Notification:
    """
    A decoded reference to a changed object.

    Attributes:
        bucket: The name of the bucket holding the object.
        key: The (URL-decoded) key of the object within the bucket.
    """

    bucket: str
    key: str

    def __str__(self) -> str:
        return f"{self.bucket}/{self.key}"


@dataclass(frozen=True)
class InspectionResult:
    """
    The classification of one object's content.

    Attributes:
        is_textual: True if every line of the object decoded cleanly.
        first_line: The first line of the object; always empty when the
                    object is not textual.
        reference: The notification this result was derived from.
    """

    is_textual: bool
    first_line: str
    reference: Notification

    def __post_init__(self):
        if not self.is_textual and self.first_line:
            raise ValueError("first_line must be empty for a non-textual object")

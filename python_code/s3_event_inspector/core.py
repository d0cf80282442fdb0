"""
Core business logic for the S3 Event Inspector.

These functions are "pure" and testable: they make no AWS SDK calls, hold no
global state and write no logs. The orchestration layer in app.py feeds them
message bodies and downloaded object bytes.
"""

from typing import Dict, Tuple, Union
from urllib.parse import unquote_plus

from pydantic import ValidationError

from .exceptions import DecodeError
from .model import Notification, S3EventNotification

# bufio's default buffer size; a first line (with its LF) that does not fit aborts the scan.
MAX_LINE_BYTES = 64 * 1024

# Maps the location of the first validation error to the failure point it denotes.
_DECODE_REASONS: Dict[Tuple[Union[str, int], ...], str] = {
    (): "failed to parse S3 event message",
    ("Records",): "no records found in S3 event",
    ("Records", 0): "invalid record structure",
    ("Records", 0, "s3"): "missing s3 information in record",
    ("Records", 0, "s3", "bucket"): "missing bucket information in record",
    ("Records", 0, "s3", "bucket", "name"): "invalid bucket name",
    ("Records", 0, "s3", "object"): "missing object information in record",
    ("Records", 0, "s3", "object", "key"): "invalid object key",
}


def _reason_for(exc: ValidationError) -> str:
    errors = exc.errors()
    loc = tuple(errors[0]["loc"]) if errors else ()
    # Fall back to the nearest enclosing failure point.
    while loc not in _DECODE_REASONS:
        loc = loc[:-1]
    reason = _DECODE_REASONS[loc]
    if not loc and errors:
        reason = f"{reason}: {errors[0]['msg']}"
    return reason


def decode_notification(body: Union[str, bytes]) -> Notification:
    """
    Parses an S3 event notification body into a Notification.

    The body is validated once against the notification schema. Only the first
    record is consumed; any further records in the same message are ignored.
    The object key is URL-decoded, as S3 form-encodes keys in notifications.

    Args:
        body: The raw SQS message body.

    Returns:
        The bucket and key referenced by the first record.

    Raises:
        DecodeError: If the body is not a well-formed notification. The reason
                     names the first structural deviation found; no field is
                     ever defaulted.
    """
    try:
        event = S3EventNotification.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(_reason_for(e)) from e

    entity = event.records[0].s3
    return Notification(bucket=entity.bucket.name, key=unquote_plus(entity.object_.key))


def classify_content(content: bytes) -> Tuple[bool, str]:
    """
    Classifies object content as textual or not by scanning its first line.

    The line ends at the first LF, with a trailing CR dropped. Only that line
    decides the result: the scan fails with a decoding error when the line
    is not valid UTF-8, or when it does not fit the scanner's MAX_LINE_BYTES
    buffer together with its terminating LF. This is a heuristic: it only
    detects failures of line-oriented decoding, not binary content in general.

    Args:
        content: The complete bytes of the object.

    Returns:
        A tuple of (is_textual, first_line). first_line is empty for empty
        objects and always empty when is_textual is False.
    """
    end = content.find(b"\n", 0, MAX_LINE_BYTES)
    if end == -1:
        if len(content) >= MAX_LINE_BYTES:
            return False, ""
        end = len(content)
    line = content[:end]
    if line.endswith(b"\r"):
        line = line[:-1]
    try:
        return True, line.decode("utf-8")
    except UnicodeDecodeError:
        return False, ""

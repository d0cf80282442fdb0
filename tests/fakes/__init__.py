"""In-memory test doubles for the queue, the object store and the report sink."""

import json

from s3_event_inspector.exceptions import DeleteError, FetchError, ReceiveError


def make_event(bucket: str = "b1", key: str = "k1") -> str:
    return json.dumps({"Records": [{"s3": {"bucket": {"name": bucket}, "object": {"key": key}}}]})


def make_message(message_id: str, body: str) -> dict:
    return {"MessageId": message_id, "ReceiptHandle": f"rh-{message_id}", "Body": body}


class RecordingSink:
    def __init__(self):
        self.lines = []

    def log_line(self, text):
        self.lines.append(text)


class FakeStore:
    def __init__(self, objects=None):
        self.objects = dict(objects or {})
        self.fetched = []

    def fetch_object(self, bucket, key):
        self.fetched.append((bucket, key))
        try:
            return self.objects[(bucket, key)]
        except KeyError:
            raise FetchError(bucket, key, KeyError("NoSuchKey")) from None


class FakeQueue:
    """Serves pre-loaded batches; optionally fails receives or specific deletes."""

    def __init__(self, batches=None, receive_failures=0, failing_receipts=()):
        self.batches = list(batches or [])
        self.receive_failures = receive_failures
        self.failing_receipts = set(failing_receipts)
        self.receive_calls = []
        self.deleted = []

    def receive(self, max_messages, wait_seconds, visibility_seconds):
        self.receive_calls.append((max_messages, wait_seconds, visibility_seconds))
        if self.receive_failures:
            self.receive_failures -= 1
            raise ReceiveError("connection reset by peer")
        return self.batches.pop(0) if self.batches else []

    def delete(self, receipt_handle):
        self.deleted.append(receipt_handle)
        if receipt_handle in self.failing_receipts:
            raise DeleteError("AccessDenied")

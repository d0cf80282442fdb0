"""
Main entry point for the S3 Event Inspector.

This module serves as the orchestrator for the consumer. Its responsibilities include:
  - Loading and validating configuration from environment variables.
  - Opening the report log and building the AWS clients once at startup.
  - Long-polling SQS for S3 event notifications.
  - Calling the pure decode and classification functions from the 'core' module.
  - Reporting every outcome and deleting every received message.
"""

import signal
import sys
import time
from typing import Callable, List, Optional, Protocol

from aws_lambda_powertools import Logger

from . import core
from .clients import S3ObjectStore, SqsQueue, get_boto_clients
from .config import SERVICE_NAME, Settings
from .exceptions import DecodeError, DeleteError, FetchError, InspectorError, ReceiveError
from .logs import DualSinkLog, LineSink
from .model import InspectionResult, Notification, RawMessage

# Operational logs go to stderr; stdout carries only the report lines.
logger = Logger(service=SERVICE_NAME, stream=sys.stderr)


class ObjectStore(Protocol):
    def fetch_object(self, bucket: str, key: str) -> bytes: ...


class MessageQueue(Protocol):
    def receive(self, max_messages: int, wait_seconds: int, visibility_seconds: int) -> List[RawMessage]: ...

    def delete(self, receipt_handle: str) -> None: ...


# --- 1. PER-MESSAGE PROCESSING ---


class ObjectInspector:
    """Fetches an object in full and classifies its content."""

    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    def inspect(self, notification: Notification) -> InspectionResult:
        """
        Raises:
            FetchError: If the object cannot be retrieved. Classification
                        itself never fails once the bytes are in hand.
        """
        content = self._store.fetch_object(notification.bucket, notification.key)
        is_textual, first_line = core.classify_content(content)
        return InspectionResult(is_textual=is_textual, first_line=first_line, reference=notification)


class MessageProcessor:
    """
    Runs decode -> inspect -> report for a single message body.

    Exactly one line is written to the sink per message: the classification
    on success, or a diagnostic naming the failed step before the error is
    re-raised to the caller.
    """

    def __init__(self, inspector: ObjectInspector, sink: LineSink) -> None:
        self._inspector = inspector
        self._sink = sink

    def process(self, body: str) -> InspectionResult:
        try:
            notification = core.decode_notification(body)
        except DecodeError as e:
            self._sink.log_line(f"Failed to extract S3 details: {e}")
            raise

        try:
            result = self._inspector.inspect(notification)
        except FetchError as e:
            self._sink.log_line(f"Failed to process file: {e}")
            raise

        if result.is_textual:
            self._sink.log_line(f"First line of textual file: {result.first_line}")
        else:
            self._sink.log_line(f"Non-textual file or file skipped: {notification}")
        return result


# --- 2. CONSUMPTION LOOP ---


class ConsumptionLoop:
    """
    Drains the queue forever, one batch and one message at a time.

    Delivery policy is fail-open: every received message is deleted after it
    has been handled, whether or not processing succeeded. A notification
    that cannot be decoded, or whose object cannot be fetched, is reported
    and then discarded rather than redelivered. Only a failed delete leaves a
    message in the queue, where it reappears once its visibility timeout
    elapses and is handled again.

    A failed receive is reported and followed by a fixed pause before the
    next poll. There is no retry limit and no exponential growth.
    """

    def __init__(
        self,
        queue: MessageQueue,
        processor: MessageProcessor,
        sink: LineSink,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._queue = queue
        self._processor = processor
        self._sink = sink
        self._settings = settings
        self._sleep = sleep

    def run(self) -> None:
        """Polls until the process is terminated."""
        while True:
            self.poll_once()

    def poll_once(self) -> int:
        """
        Performs one receive and handles the resulting batch in delivery order.

        Returns:
            The number of messages received; 0 after an empty long-poll or a
            failed receive (which has already been followed by the backoff).
        """
        try:
            messages = self._queue.receive(
                max_messages=self._settings.max_messages,
                wait_seconds=self._settings.wait_time_seconds,
                visibility_seconds=self._settings.visibility_timeout_seconds,
            )
        except ReceiveError as e:
            self._sink.log_line(f"Failed to receive messages: {e}")
            self._sleep(self._settings.error_backoff_seconds)
            return 0

        if messages:
            logger.debug("Received batch", extra={"count": len(messages)})
        for message in messages:
            self._handle(message)
        return len(messages)

    def _handle(self, message: RawMessage) -> None:
        message_id = message["MessageId"]
        error: Optional[InspectorError] = None
        try:
            self._processor.process(message["Body"])
        except InspectorError as e:
            error = e

        self._sink.log_line(f"Received message: {message['Body']}")
        if error is not None:
            self._sink.log_line(f"Error processing message {message_id}: {error}")

        # Deleted regardless of the processing outcome.
        try:
            self._queue.delete(message["ReceiptHandle"])
        except DeleteError as e:
            self._sink.log_line(f"Failed to delete message {message_id}: {e}")
            return
        self._sink.log_line(f"Message deleted: {message_id}")


# --- 3. ENTRY POINT ---


def _exit_on_sigterm(signum, frame):
    raise SystemExit(128 + signum)


def main() -> int:
    """
    Builds the consumer from the environment and runs it until terminated.

    A bad configuration or an unopenable log file aborts immediately with a
    non-zero exit code. Once the loop is running no error is fatal.
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        logger.error("Invalid configuration", extra={"error": str(e)})
        return 1
    logger.setLevel(settings.log_level)

    try:
        sink = DualSinkLog(settings.log_file)
    except OSError as e:
        logger.error("Failed to open log file", extra={"log_file": settings.log_file, "error": str(e)})
        return 1

    signal.signal(signal.SIGTERM, _exit_on_sigterm)
    with sink:
        s3_client, sqs_client = get_boto_clients(settings.region, settings.endpoint_url)
        processor = MessageProcessor(ObjectInspector(S3ObjectStore(s3_client)), sink)
        loop = ConsumptionLoop(SqsQueue(sqs_client, settings.queue_url), processor, sink, settings)

        logger.info("Starting consumer", extra={"queue_url": settings.queue_url, "region": settings.region})
        sink.log_line(f"Listening for messages from SQS queue {settings.queue_url}...")
        try:
            loop.run()
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        finally:
            sink.log_line("Consumer stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Factory and thin adapters for the AWS services the inspector talks to.

The factory is the dependency injection seam for the application: the entry
point builds real clients here, while tests either hand in `moto`-backed
clients or replace the adapters with in-memory fakes. The adapters narrow the
boto3 surface to the three calls the consumer needs and translate botocore
failures into the inspector's own exception types.
"""

import io
from typing import List, Optional, Tuple

import boto3
import botocore.config
from aws_lambda_powertools import Logger
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from mypy_boto3_s3 import S3Client
from mypy_boto3_sqs import SQSClient

from .config import SERVICE_NAME
from .exceptions import DeleteError, FetchError, ReceiveError
from .model import RawMessage

logger = Logger(service=SERVICE_NAME, child=True)

# A shared, robust retry configuration for both clients, resilient to
# transient network or server-side errors.
BOTO_CONFIG_RETRYABLE = botocore.config.Config(
    retries={"max_attempts": 5, "mode": "adaptive"}
)


def get_boto_clients(
    region: Optional[str], endpoint_url: Optional[str] = None
) -> Tuple[S3Client, SQSClient]:
    """
    Returns the S3 and SQS clients used by the consumer.

    Credentials come from boto3's default resolution chain. Under a `moto`
    mock these calls are intercepted and return mocked clients.

    Args:
        region: The AWS region for both clients.
        endpoint_url: An optional endpoint override, e.g. for LocalStack.

    Returns:
        A tuple of (s3_client, sqs_client).
    """
    if not region:
        logger.warning("AWS region not set, boto3 will attempt to resolve it.")

    kwargs = {"region_name": region, "config": BOTO_CONFIG_RETRYABLE}
    if endpoint_url:
        logger.info("Using endpoint override", extra={"endpoint_url": endpoint_url})
        kwargs["endpoint_url"] = endpoint_url

    s3_client: S3Client = boto3.client("s3", **kwargs)
    sqs_client: SQSClient = boto3.client("sqs", **kwargs)
    return s3_client, sqs_client


class SqsQueue:
    """The receive/delete surface of one SQS queue."""

    def __init__(self, client: SQSClient, queue_url: str) -> None:
        self._client = client
        self.queue_url = queue_url

    def receive(self, max_messages: int, wait_seconds: int, visibility_seconds: int) -> List[RawMessage]:
        """
        Long-polls the queue for a batch of messages.

        Returns:
            The received messages in delivery order; empty if the wait elapsed
            without any message becoming available.

        Raises:
            ReceiveError: If the receive call fails.
        """
        try:
            response = self._client.receive_message(
                QueueUrl=self.queue_url,
                MaxNumberOfMessages=max_messages,
                WaitTimeSeconds=wait_seconds,
                VisibilityTimeout=visibility_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            raise ReceiveError(str(e)) from e
        return [
            RawMessage(
                MessageId=m.get("MessageId", ""),
                ReceiptHandle=m.get("ReceiptHandle", ""),
                Body=m.get("Body", ""),
            )
            for m in response.get("Messages", [])
        ]

    def delete(self, receipt_handle: str) -> None:
        """
        Deletes one delivery of a message.

        Raises:
            DeleteError: If the delete call fails. The message stays in the
                         queue and reappears after its visibility timeout.
        """
        try:
            self._client.delete_message(QueueUrl=self.queue_url, ReceiptHandle=receipt_handle)
        except (ClientError, BotoCoreError) as e:
            raise DeleteError(str(e)) from e


class S3ObjectStore:
    """Whole-object reads from S3."""

    def __init__(self, client: S3Client) -> None:
        self._client = client

    def fetch_object(self, bucket: str, key: str) -> bytes:
        """
        Downloads the complete content of an object into memory.

        Uses boto3's managed transfer, which parallelises large objects into
        ranged parts internally but always yields the full content.

        Raises:
            FetchError: If the object cannot be retrieved (network, auth,
                        missing bucket or key).
        """
        buffer = io.BytesIO()
        try:
            self._client.download_fileobj(bucket, key, buffer)
        except (ClientError, BotoCoreError, Boto3Error) as e:
            raise FetchError(bucket, key, e) from e
        return buffer.getvalue()

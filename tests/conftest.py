import pytest

from s3_event_inspector.config import Settings


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials so boto3 never reaches for real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def settings():
    return Settings(queue_url="https://sqs.us-east-1.amazonaws.com/123456789012/events")

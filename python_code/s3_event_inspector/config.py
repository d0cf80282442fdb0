"""
Configuration for the S3 Event Inspector.

All settings come from environment variables and are read once at startup.
A missing required variable or an out-of-range value raises ValueError, which
aborts the process before the consumption loop starts.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

SERVICE_NAME = "s3-event-inspector"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_env_var(name: str, default: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Gets an environment variable or raises a ValueError for fast-failure.

    Args:
        name: The name of the environment variable.
        default: An optional default value. If not provided, the variable is required.
        environ: The mapping to read from. Defaults to os.environ.

    Returns:
        The value of the environment variable.

    Raises:
        ValueError: If the required environment variable is not set.
    """
    env = os.environ if environ is None else environ
    value = env.get(name, default)
    if value is None:
        raise ValueError(f"FATAL: Environment variable '{name}' is not set.")
    return value


def _get_int(name: str, default: int, low: int, high: int, environ: Optional[Mapping[str, str]]) -> int:
    raw = get_env_var(name, str(default), environ)
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"FATAL: Environment variable '{name}' must be an integer, got {raw!r}.") from None
    if not low <= value <= high:
        raise ValueError(f"FATAL: Environment variable '{name}' must be between {low} and {high}, got {value}.")
    return value


def _get_log_level(environ: Optional[Mapping[str, str]]) -> str:
    level = get_env_var("LOG_LEVEL", "INFO", environ).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"FATAL: Environment variable 'LOG_LEVEL' must be one of {', '.join(LOG_LEVELS)}, got {level!r}.")
    return level


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for the consumer.

    The receive parameters default to the values the queue contract is built
    around: batches of up to 10 messages, a 20 second long-poll and a 30 second
    visibility window, with a fixed 5 second pause after a failed receive.
    """

    queue_url: str
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    log_file: str = "s3_events.log"
    log_level: str = "INFO"
    max_messages: int = 10
    wait_time_seconds: int = 20
    visibility_timeout_seconds: int = 30
    error_backoff_seconds: int = 5

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        queue_url = get_env_var("QUEUE_URL", environ=environ)
        if not queue_url:
            raise ValueError("FATAL: Environment variable 'QUEUE_URL' is empty.")
        return cls(
            queue_url=queue_url,
            region=get_env_var("AWS_REGION", "us-east-1", environ),
            endpoint_url=get_env_var("AWS_ENDPOINT_URL", "", environ) or None,
            log_file=get_env_var("LOG_FILE", "s3_events.log", environ),
            log_level=_get_log_level(environ),
            # SQS limits: 1-10 messages per receive, 0-20s wait, 0-12h visibility.
            max_messages=_get_int("MAX_MESSAGES", 10, 1, 10, environ),
            wait_time_seconds=_get_int("WAIT_TIME_SECONDS", 20, 0, 20, environ),
            visibility_timeout_seconds=_get_int("VISIBILITY_TIMEOUT_SECONDS", 30, 0, 43200, environ),
            error_backoff_seconds=_get_int("ERROR_BACKOFF_SECONDS", 5, 0, 3600, environ),
        )

"""Consumes S3 event notifications from SQS and reports whether each object is textual."""

__version__ = "0.1.0"

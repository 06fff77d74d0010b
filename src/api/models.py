"""API models."""

import hashlib

from django.conf import settings
from django.db import models

from common.models import TimeStampedModel


def get_version() -> str:
    """Get the current version of the application."""
    return settings.VERSION


def error_signature(path: str, traceback_str: str) -> str:
    """Fingerprint an error by where it happened and how."""
    return hashlib.md5(f"{path}\n{traceback_str}".encode(), usedforsecurity=False).hexdigest()


class Error(TimeStampedModel):
    """A deduplicated internal server error."""

    md5 = models.CharField(max_length=32, unique=True, editable=False)
    path = models.CharField(max_length=500, db_index=True)
    server_version = models.CharField(max_length=32, default=get_version, db_index=True)
    traceback = models.TextField()
    payload = models.BinaryField(null=True, blank=True)
    json_payload = models.JSONField(null=True, blank=True)
    request_metadata = models.JSONField(null=True, blank=True)
    issue_url = models.URLField(blank=True, default="")
    issue_solved = models.BooleanField(default=False)

    def __str__(self) -> str:
        return f"{self.path} ({self.md5[:8]})"


class ErrorOccurrence(models.Model):
    """One occurrence of an Error."""

    signature = models.ForeignKey(Error, on_delete=models.CASCADE)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-timestamp"]

    def __str__(self) -> str:
        return f"{self.signature_id} @ {self.timestamp:%Y-%m-%d %H:%M:%S}"

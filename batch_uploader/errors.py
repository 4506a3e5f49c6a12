"""
Error kinds raised across the uploader.

Closed set: every failure that can reach the orchestrator boundary is one of
these, and ``describe_failure`` turns each into the text stored on a status.
"""
from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import UploadStatus


class UploaderError(Exception):
    """Base class for uploader errors."""


class ValidationError(UploaderError):
    """A single file was rejected before grouping."""

    def __init__(self, field: str, message: str):
        super().__init__(f"[{field}] - {message}")
        self.field = field
        self.message = message


class TransportError(UploaderError):
    """Sending a group failed (network, server or request preparation)."""

    def __init__(self, reason: str, code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.code = code


class ConfigError(UploaderError):
    """Configuration is missing or invalid. Fatal before any dispatch."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CooldownError(UploaderError):
    """A new batch was requested before the cooldown window elapsed."""

    def __init__(self, remaining: float):
        super().__init__(f"Please wait {remaining:.1f} seconds before starting a new upload.")
        self.remaining = remaining


class BatchInProgressError(UploaderError):
    """A new batch was requested while the previous one is still running."""

    def __init__(self):
        super().__init__("A batch upload is already in progress.")


class BatchUploadFailed(UploaderError):
    """Raised after all groups settled when the caller asked for failures to propagate."""

    def __init__(self, failures: Sequence["UploadStatus"]):
        names = ", ".join(s.id for s in failures)
        super().__init__(f"{len(failures)} group(s) failed: {names}")
        self.failures = list(failures)


def describe_failure(exc: BaseException) -> str:
    """Render an exception raised by a collaborator as a status message."""
    if isinstance(exc, ValidationError):
        return f"File failed validation: [{exc.field}] - {exc.message}"
    if isinstance(exc, TransportError):
        if exc.code is not None and str(exc.code) not in exc.reason:
            return f"Upload failed: {exc.reason} (code {exc.code})"
        return f"Upload failed: {exc.reason}"
    if isinstance(exc, ConfigError):
        return f"Upload failed: configuration error: {exc.reason}"
    return f"Upload failed: {str(exc) or 'Unknown upload error.'}"

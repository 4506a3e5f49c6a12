"""
Protocols (Interfaces) for the two collaborators the orchestrator consumes.

The orchestrator depends only on these, never on HTTP or MIME rules.
"""
from typing import Protocol, runtime_checkable

from .models import FileDescriptor, Group, UploadReceipt


@runtime_checkable
class IValidator(Protocol):
    """Interface for pre-flight per-file validation."""

    def validate(self, file: FileDescriptor) -> None:
        """Return if the file may be uploaded, raise ValidationError otherwise."""
        ...


@runtime_checkable
class IUploader(Protocol):
    """Interface for sending one group to the remote endpoint."""

    async def send(self, group: Group) -> UploadReceipt:
        """Send every file of the group in one request. Raises TransportError."""
        ...

"""
Models for batch uploader.

Immutable dataclasses: a status transition builds a new UploadStatus that
replaces the previous record with the same id.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .utils.formatting import human_size

GROUP_ID_SEPARATOR = "|"


@dataclass(frozen=True)
class FileDescriptor:
    """A file selected for upload. Owned by the caller."""
    name: str
    size: int
    mime_type: str
    path: Optional[Path] = field(default=None, compare=False)


Group = Tuple[FileDescriptor, ...]


def group_names(group: Sequence[FileDescriptor]) -> Tuple[str, ...]:
    return tuple(f.name for f in group)


def group_size(group: Sequence[FileDescriptor]) -> int:
    return sum(f.size for f in group)


def group_id(group: Sequence[FileDescriptor]) -> str:
    """Stable id derived from the member file names."""
    return GROUP_ID_SEPARATOR.join(group_names(group))


class UploadState(Enum):
    """Upload state of one group."""
    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"
    VALIDATION_ERROR = "validation-error"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.SUCCESS, UploadState.ERROR, UploadState.VALIDATION_ERROR)


@dataclass(frozen=True)
class UploadStatus:
    """Status record of one group (or one rejected file)."""
    id: str
    file_names: Tuple[str, ...]
    total_size: int
    status: UploadState = UploadState.PENDING
    message: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def success(self) -> bool:
        return self.status == UploadState.SUCCESS

    @classmethod
    def pending(cls, group: Sequence[FileDescriptor]) -> "UploadStatus":
        size = group_size(group)
        return cls(
            id=group_id(group),
            file_names=group_names(group),
            total_size=size,
            status=UploadState.PENDING,
            message=f"Queued for upload... ({len(group)} files, {human_size(size)})",
        )

    @classmethod
    def rejected(cls, file: FileDescriptor, status_id: str, message: str) -> "UploadStatus":
        return cls(
            id=status_id,
            file_names=(file.name,),
            total_size=file.size,
            status=UploadState.VALIDATION_ERROR,
            message=message,
        )

    def transition(self, status: UploadState, message: str) -> "UploadStatus":
        """Return the next record for this group."""
        if self.is_terminal:
            raise ValueError(f"Status {self.id!r} is already terminal ({self.status.value})")
        return replace(self, status=status, message=message)


@dataclass(frozen=True)
class UploadReceipt:
    """What the uploader reports back for a successfully sent group."""
    message: Optional[str] = None
    objects: Tuple[str, ...] = ()

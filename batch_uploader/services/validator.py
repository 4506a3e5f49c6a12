"""
Validator Service - Single Responsibility: decide whether a file may be uploaded.

Two policies: a deny-list run on the client before grouping, and an
allow-list matching what the receiving server accepts.
"""
from typing import Iterable, Optional
import logging

from ..config import DEFAULT_MAX_FILE_SIZE
from ..errors import ValidationError
from ..models import FileDescriptor
from ..utils.formatting import megabytes
logger = logging.getLogger(__name__)

FORBIDDEN_MIME_TYPES = (
    "application/x-msdownload",  # .exe, .dll
    "application/x-sh",
    "application/x-elf",
    "text/html",
    "application/vnd.microsoft.portable-executable",
)

DEFAULT_ALLOWED_MIME_TYPES = (
    "application/pdf",
    "text/csv",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "image/jpeg",
    "image/png",
    "image/webp",
    "text/plain",
    "application/json",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


def _check_shape(file: FileDescriptor) -> None:
    if not file.name:
        raise ValidationError("name", "File name must not be empty.")
    if isinstance(file.size, bool) or not isinstance(file.size, int) or file.size < 0:
        raise ValidationError("size", "File size must be a non-negative number of bytes.")
    if not file.mime_type:
        raise ValidationError("type", "File type must not be empty.")


class ForbiddenTypeValidator:
    """
    Rejects oversized files and dangerous MIME types.

    Implements IValidator protocol. Checks run in order name, size, type and
    the first violation wins.
    """

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        forbidden_types: Optional[Iterable[str]] = None,
    ):
        self._max_file_size = max_file_size
        self._forbidden = frozenset(
            t.lower() for t in (FORBIDDEN_MIME_TYPES if forbidden_types is None else forbidden_types)
        )

    @property
    def forbidden_types(self) -> frozenset:
        return self._forbidden

    def validate(self, file: FileDescriptor) -> None:
        _check_shape(file)
        if file.size > self._max_file_size:
            limit = megabytes(self._max_file_size)
            raise ValidationError("size", f"File size must be less than {limit} MB. (Max {limit} MB)")
        if file.mime_type.lower() in self._forbidden:
            raise ValidationError("type", "Forbidden file type detected.")


class MimeAllowListValidator:
    """
    Accepts only MIME types from an allow-list.

    Implements IValidator protocol.
    """

    def __init__(self, allowed_types: Iterable[str] = DEFAULT_ALLOWED_MIME_TYPES):
        self._allowed = frozenset(t.lower() for t in allowed_types)
        logger.debug(f"Initialized with {len(self._allowed)} allowed MIME types")

    def validate(self, file: FileDescriptor) -> None:
        _check_shape(file)
        if file.mime_type.lower() not in self._allowed:
            raise ValidationError(
                "type",
                f"Disallowed MIME type detected for file \"{file.name}\". "
                f"Type found: {file.mime_type}.",
            )

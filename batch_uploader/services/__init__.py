"""Services for batch uploader: the collaborators the orchestrator consumes."""
from .http_uploader import HTTPUploader
from .mock_uploader import MockUploader
from .validator import (
    DEFAULT_ALLOWED_MIME_TYPES,
    FORBIDDEN_MIME_TYPES,
    ForbiddenTypeValidator,
    MimeAllowListValidator,
)

__all__ = [
    "HTTPUploader",
    "MockUploader",
    "ForbiddenTypeValidator",
    "MimeAllowListValidator",
    "FORBIDDEN_MIME_TYPES",
    "DEFAULT_ALLOWED_MIME_TYPES",
]

"""
Batch uploader - packs files into size-bounded groups and uploads the groups concurrently.

Each group becomes one request with its own status record, so a caller can
render live progress and partial success is an expected outcome.

Usage:
    from batch_uploader import (
        BatchUploadOrchestrator, ForbiddenTypeValidator, HTTPUploader, load_config,
    )

    config = load_config()
    async with HTTPUploader(config) as uploader:
        orchestrator = BatchUploadOrchestrator(uploader, ForbiddenTypeValidator(), config)
        orchestrator.board.on_status(lambda status: print(status.id, status.message))
        result = await orchestrator.upload(files)

    # Packing on its own
    from batch_uploader import pack
    groups = pack(files, budget=10 * 1024 * 1024)
"""
__version__ = "0.1.0"

from .config import UploadConfig, load_config
from .errors import (
    BatchInProgressError,
    BatchUploadFailed,
    ConfigError,
    CooldownError,
    TransportError,
    UploaderError,
    ValidationError,
)
from .models import FileDescriptor, Group, UploadReceipt, UploadState, UploadStatus
from .orchestrator import BatchUploadOrchestrator, BatchUploadResult, StatusBoard
from .packer import pack
from .services import (
    ForbiddenTypeValidator,
    HTTPUploader,
    MimeAllowListValidator,
    MockUploader,
)

__all__ = [
    # Main
    "BatchUploadOrchestrator",
    "BatchUploadResult",
    "StatusBoard",
    "pack",
    # Models
    "FileDescriptor",
    "Group",
    "UploadReceipt",
    "UploadState",
    "UploadStatus",
    # Config
    "UploadConfig",
    "load_config",
    # Errors
    "UploaderError",
    "ValidationError",
    "TransportError",
    "ConfigError",
    "CooldownError",
    "BatchInProgressError",
    "BatchUploadFailed",
    # Services
    "ForbiddenTypeValidator",
    "MimeAllowListValidator",
    "HTTPUploader",
    "MockUploader",
]

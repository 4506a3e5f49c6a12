"""Core orchestrator - validates, packs and dispatches groups concurrently."""
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence
import asyncio
import logging
import time
import uuid

from ..config import UploadConfig
from ..errors import BatchInProgressError, BatchUploadFailed, TransportError, ValidationError, describe_failure
from ..models import FileDescriptor, Group, UploadState, UploadStatus
from ..packer import pack
from ..protocols import IUploader, IValidator
from .cooldown import ensure_cooldown_elapsed
from .models import BatchPlan, BatchUploadResult
from .status_board import StatusBoard
logger = logging.getLogger(__name__)


class BatchUploadOrchestrator:
    """
    Orchestrates batch uploads using injected collaborators.

    One status record per group lives on the StatusBoard; each group moves
    pending -> uploading -> success | error on its own. Rejected files are
    recorded directly as validation-error and never reach the uploader.

    Usage:
        async with HTTPUploader(config) as uploader:
            orchestrator = BatchUploadOrchestrator(uploader, ForbiddenTypeValidator(), config)
            orchestrator.board.on_status(lambda status: print(status.message))
            result = await orchestrator.upload(files)
    """

    def __init__(
        self,
        uploader: IUploader,
        validator: Optional[IValidator] = None,
        config: Optional[UploadConfig] = None,
        board: Optional[StatusBoard] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize orchestrator with dependencies.

        Args:
            uploader: Sends one group per call
            validator: Pre-flight per-file check (None accepts every file)
            config: Upload configuration (byte budget, cooldown)
            board: Status collection shared with the caller
            clock: Time source for the cooldown check
        """
        self._uploader = uploader
        self._validator = validator
        self._config = config or UploadConfig()
        self._config.validate(require_endpoint=False)
        self.board = board or StatusBoard()
        self._clock = clock
        self._in_flight = False

    @property
    def config(self) -> UploadConfig:
        return self._config

    def plan(self, files: Sequence[FileDescriptor]) -> BatchPlan:
        """Validate every file, pack the accepted ones and build the initial statuses."""
        token = uuid.uuid4().hex[:8]
        accepted: List[FileDescriptor] = []
        rejected: List[UploadStatus] = []

        for index, file in enumerate(files):
            try:
                if self._validator is not None:
                    self._validator.validate(file)
            except ValidationError as exc:
                logger.info(f"Rejected {file.name}: {exc}")
                rejected.append(UploadStatus.rejected(
                    file, f"validation-err-{index}-{token}", describe_failure(exc)
                ))
            except Exception as exc:
                logger.error(f"Validator crashed on {file.name}: {exc}", exc_info=True)
                rejected.append(UploadStatus(
                    id=f"unknown-err-{index}-{token}",
                    file_names=(file.name,),
                    total_size=file.size,
                    status=UploadState.ERROR,
                    message="An unknown error occurred during file processing.",
                ))
            else:
                accepted.append(file)

        groups = pack(accepted, self._config.byte_budget)
        pending = self._pending_statuses(groups)
        return BatchPlan(groups=groups, pending=pending, rejected=rejected)

    @staticmethod
    def _pending_statuses(groups: Sequence[Group]) -> List[UploadStatus]:
        statuses = []
        seen: Dict[str, int] = {}
        for group in groups:
            status = UploadStatus.pending(group)
            # Two groups can carry the same names (same file name in different folders)
            count = seen.get(status.id, 0)
            seen[status.id] = count + 1
            if count:
                status = replace(status, id=f"{status.id}#{count}")
            statuses.append(status)
        return statuses

    async def upload(
        self,
        files: Sequence[FileDescriptor],
        last_invocation: Optional[float] = None,
        on_status: Optional[Callable[[UploadStatus], None]] = None,
        raise_on_error: bool = False,
    ) -> BatchUploadResult:
        """
        Upload a batch of files, one concurrent request per group.

        Args:
            files: Files selected by the user
            last_invocation: ``finished_at`` of the previous batch, for the cooldown check
            on_status: Extra sink called after every status change of this batch
            raise_on_error: Raise BatchUploadFailed once everything settled
                if any group failed or any file was rejected

        Returns:
            BatchUploadResult with the final status of every group

        Raises:
            CooldownError: Before anything starts, if called too soon
            BatchInProgressError: If another batch on this orchestrator has not settled
        """
        if self._in_flight:
            raise BatchInProgressError()
        ensure_cooldown_elapsed(self._clock(), last_invocation, self._config.cooldown_seconds)

        plan = self.plan(files)
        self._in_flight = True
        try:
            await self.board.seed(plan.initial_statuses)
            if on_status is not None:
                self.board.on_status(on_status)

            logger.info(
                f"Starting batch: {len(files)} files -> {len(plan.groups)} groups, "
                f"{len(plan.rejected)} rejected "
                f"(budget {self._config.byte_budget} bytes)"
            )

            for status in plan.rejected:
                await self.board.announce(status)

            await asyncio.gather(*(
                self._upload_group(group, status)
                for group, status in zip(plan.groups, plan.pending)
            ))
            result = BatchUploadResult(statuses=self.board.snapshot(), finished_at=self._clock())
        finally:
            self._in_flight = False
            if on_status is not None:
                self.board.off_status(on_status)

        logger.info(
            f"Batch complete: {result.succeeded} succeeded, {result.failed} failed, "
            f"{result.rejected} rejected"
        )

        if raise_on_error and result.failures:
            raise BatchUploadFailed(result.failures)
        return result

    async def _upload_group(self, group: Group, pending: UploadStatus) -> UploadStatus:
        """Run one group to a terminal state. Never raises for upload failures."""
        uploading = pending.transition(UploadState.UPLOADING, f"Sending {len(group)} files...")
        await self.board.update(uploading)

        try:
            receipt = await self._uploader.send(group)
        except Exception as exc:
            logger.error(f"Group {pending.id!r} failed: {exc}", exc_info=not isinstance(exc, TransportError))
            final = uploading.transition(UploadState.ERROR, describe_failure(exc))
        else:
            message = getattr(receipt, "message", None) or "OK"
            final = uploading.transition(
                UploadState.SUCCESS, f"Upload finished. Backend response: {message}"
            )

        await self.board.update(final)
        return final

"""Orchestrator data models."""
from dataclasses import dataclass, field
from typing import List, Optional

from ..models import Group, UploadState, UploadStatus


@dataclass
class BatchPlan:
    """Validated and packed batch, ready for dispatch."""
    groups: List[Group]
    pending: List[UploadStatus]
    rejected: List[UploadStatus] = field(default_factory=list)

    @property
    def initial_statuses(self) -> List[UploadStatus]:
        return self.rejected + self.pending


@dataclass
class BatchUploadResult:
    """Result of one batch: every group and rejected file, in board order."""
    statuses: List[UploadStatus]
    finished_at: Optional[float] = None

    def _count(self, *states: UploadState) -> int:
        return sum(1 for s in self.statuses if s.status in states)

    @property
    def total_groups(self) -> int:
        return sum(1 for s in self.statuses if s.status != UploadState.VALIDATION_ERROR)

    @property
    def succeeded(self) -> int:
        return self._count(UploadState.SUCCESS)

    @property
    def failed(self) -> int:
        return self._count(UploadState.ERROR)

    @property
    def rejected(self) -> int:
        return self._count(UploadState.VALIDATION_ERROR)

    @property
    def all_success(self) -> bool:
        return bool(self.statuses) and self.succeeded == len(self.statuses)

    @property
    def failures(self) -> List[UploadStatus]:
        return [s for s in self.statuses if s.status in (UploadState.ERROR, UploadState.VALIDATION_ERROR)]

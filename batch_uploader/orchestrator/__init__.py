"""Orchestrator package - coordinates batch uploads."""
from .core import BatchUploadOrchestrator
from .models import BatchPlan, BatchUploadResult
from .status_board import StatusBoard

__all__ = ["BatchUploadOrchestrator", "BatchPlan", "BatchUploadResult", "StatusBoard"]

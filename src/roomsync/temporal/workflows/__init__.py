"""Temporal Workflows - Re-exports for worker registration."""

from src.roomsync.temporal.workflows.grace_period import GracePeriodInput, GracePeriodWorkflow
from src.roomsync.temporal.workflows.maintenance import MaintenanceWorkflow

__all__ = [
    "GracePeriodInput",
    "GracePeriodWorkflow",
    "MaintenanceWorkflow",
]

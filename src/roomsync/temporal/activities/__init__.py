"""
Temporal Activities - Fine-grained, idempotent operations.

Activities should be:
1. Idempotent - Safe to retry
2. Fine-grained - Do one thing well
3. Side-effect aware - External calls go here, not in workflows
"""

from src.roomsync.temporal.activities.maintenance import (
    cleanup_invitations,
    expire_transfer_requests,
    reconcile_directory,
    resume_grace_periods,
)
from src.roomsync.temporal.activities.subscription import (
    GraceCheckInput,
    run_grace_expiry_check,
)

__all__ = [
    # Dataclasses
    "GraceCheckInput",
    # Subscription
    "run_grace_expiry_check",
    # Maintenance
    "cleanup_invitations",
    "expire_transfer_requests",
    "reconcile_directory",
    "resume_grace_periods",
]

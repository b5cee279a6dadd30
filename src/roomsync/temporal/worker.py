"""
Temporal Worker - Separate process from API.

Run with:
    python -m src.roomsync.temporal.worker
    python -m src.roomsync.temporal.worker --no-maintenance   # Skip cron registration
"""

import argparse
import asyncio
from collections.abc import Sequence

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.worker import Worker

from src.roomsync.core.config import get_settings
from src.roomsync.core.db import dispose_engine
from src.roomsync.core.logging import get_logger, setup_logging
from src.roomsync.temporal.activities import (
    cleanup_invitations,
    expire_transfer_requests,
    reconcile_directory,
    resume_grace_periods,
    run_grace_expiry_check,
)
from src.roomsync.temporal.scheduling import ensure_maintenance_workflow
from src.roomsync.temporal.workflows import GracePeriodWorkflow, MaintenanceWorkflow

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001

ACTIVITIES = [
    cleanup_invitations,
    expire_transfer_requests,
    reconcile_directory,
    resume_grace_periods,
    run_grace_expiry_check,
]

WORKFLOWS = [GracePeriodWorkflow, MaintenanceWorkflow]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Temporal worker")
    parser.add_argument(
        "--no-maintenance",
        action="store_true",
        help="Do not register the maintenance cron workflow on startup",
    )
    parser.add_argument(
        "--health-port",
        type=int,
        default=WORKER_HEALTH_PORT,
        help=f"Port for the health server (default: {WORKER_HEALTH_PORT})",
    )
    return parser.parse_args()


def create_worker(
    client: Client,
    task_queue: str,
    workflows: Sequence[type],
    activities: Sequence[object],
    *,
    max_concurrent_activities: int = 50,
    max_concurrent_workflow_tasks: int = 50,
) -> Worker:
    """Create a worker with tuned settings.

    Args:
        client: Temporal client
        task_queue: Task queue name
        workflows: List of workflow classes
        activities: List of activity functions
        max_concurrent_activities: Max concurrent activity executions
        max_concurrent_workflow_tasks: Max concurrent workflow task executions

    Returns:
        Configured Worker instance
    """
    return Worker(
        client,
        task_queue=task_queue,
        workflows=list(workflows),
        activities=list(activities),  # type: ignore[arg-type]
        max_concurrent_activities=max_concurrent_activities,
        max_concurrent_workflow_tasks=max_concurrent_workflow_tasks,
    )


async def run_health_server(task_queue: str, port: int = WORKER_HEALTH_PORT) -> None:
    """Run a lightweight health server for K8s probes."""
    health_app = FastAPI(title="Temporal Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str]:
        return {
            "status": "healthy",
            "service": "temporal-worker",
            "task_queue": task_queue,
        }

    @health_app.get("/ready")
    async def ready() -> dict[str, str]:
        return {"status": "ready"}

    config = uvicorn.Config(
        health_app,
        host="0.0.0.0",
        port=port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    logger.info(f"Starting health server on port {port}")
    await server.serve()


async def main() -> None:
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug)

    client = await Client.connect(
        settings.temporal_host,
        namespace=settings.temporal_namespace,
    )

    if not args.no_maintenance:
        await ensure_maintenance_workflow(client)

    worker = create_worker(
        client,
        settings.temporal_task_queue,
        workflows=WORKFLOWS,
        activities=ACTIVITIES,
    )
    logger.info(f"Polling task queue: {settings.temporal_task_queue}")

    try:
        health_task = asyncio.create_task(
            run_health_server(settings.temporal_task_queue, args.health_port)
        )
        await worker.run()
        await health_task
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())

# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Provides the status endpoint for background tasks (reminder emails).
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import CurrentUser
from app.exceptions import ShootPlannerException
from core.models.task import TaskState, TaskStatus
from lib.casing import camel_keys

logger = logging.getLogger(__name__)

router = APIRouter()

# Celery states that are reported as still running
_RUNNING_STATES = {"STARTED", "RETRY", "RECEIVED"}


@router.get("/{task_id}")
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")],
    user: CurrentUser,
):
    """
    Get the status of a background task.

    - PENDING: Task is waiting in queue (or the id is unknown)
    - STARTED: Task has been picked up by a worker
    - SUCCESS: Task completed; includes result
    - FAILURE: Task failed; includes error
    """
    from workers.celery_app import celery_app

    try:
        result = celery_app.AsyncResult(task_id)
        state = result.status
    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise ShootPlannerException(
            f"Failed to get task status: {e}",
            code="TASK_STATUS_UNAVAILABLE",
            status_code=503,
            suggestion="Check that Redis is reachable",
        )

    if state == "SUCCESS":
        value = result.result
        response = TaskStatus(
            task_id=task_id,
            status=TaskState.SUCCESS,
            result=value if isinstance(value, dict) else {"value": value},
        )
    elif state == "FAILURE":
        response = TaskStatus(
            task_id=task_id,
            status=TaskState.FAILURE,
            error=str(result.result) if result.result else "Unknown error",
        )
    elif state in _RUNNING_STATES:
        response = TaskStatus(task_id=task_id, status=TaskState.STARTED)
    else:
        response = TaskStatus(task_id=task_id, status=TaskState.PENDING)

    return camel_keys(response.model_dump(mode="json"))

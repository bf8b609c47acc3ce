# =============================================================================
# core/models/task.py - Background Task Schemas
# =============================================================================
# Reminder emails run in a Celery worker. The API returns a task id
# immediately; clients poll GET /api/tasks/{task_id} for the outcome.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TaskState(str, Enum):
    """
    Celery states surfaced to clients.

    State machine:
        PENDING -> STARTED -> SUCCESS
                          \\-> FAILURE
    """
    PENDING = "PENDING"
    STARTED = "STARTED"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class TaskStatus(BaseModel):
    """Response for GET /api/tasks/{task_id}."""

    task_id: str
    status: TaskState
    result: dict[str, Any] | None = Field(
        default=None,
        description="Task return value when status is SUCCESS"
    )
    error: str | None = Field(
        default=None,
        description="Error message when status is FAILURE"
    )

# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Provides endpoints for checking background task status and results.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path
from pydantic import BaseModel

from app.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    progress: int | None = None
    message: str | None = None
    result: dict | None = None
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")]
):
    """
    Get the status of a background task.

    Returns the current state of the task:
    - PENDING: Task is waiting in queue (or the ID is unknown)
    - STARTED: Task has been picked up by a worker
    - PROGRESS: Bulk send is running; progress is percent of recipients done
    - SUCCESS: Task completed; result holds the batch summary
    - FAILURE: Task failed
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)
        status = result.status
        info = result.info
    except Exception as e:
        raise UpstreamServiceError("Failed to get task status", cause=e)

    response = TaskStatusResponse(task_id=task_id, status=status)

    if status == "PROGRESS":
        info = info or {}
        response.progress = info.get("percent", 0)
        response.message = info.get("message", "Processing...")

    elif status == "SUCCESS":
        response.result = result.result
        response.progress = 100
        response.message = "Complete"

    elif status == "FAILURE":
        response.error = str(result.result) if result.result else "Unknown error"
        response.message = "Failed"

    elif status == "PENDING":
        response.progress = 0
        response.message = "Waiting in queue..."

    elif status == "STARTED":
        response.progress = 0
        response.message = "Starting..."

    return response

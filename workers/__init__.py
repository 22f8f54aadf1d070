# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background notification delivery.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (bulk SMS)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q default,notifications --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import send_bulk_sms_task
#   result = send_bulk_sms_task.delay(recipients, message, business_id)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]

"""
System endpoints - task introspection
"""

from typing import Any, Dict

from fastapi import APIRouter

from market_timers.lifecycle.task_registry import TaskRegistry
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/tasks/summary")
async def get_task_summary() -> Dict[str, Any]:
    """
    High-level task summary.

    Returns:
        - summary: Human-readable summary string
        - total: Tasks still held by the registry
        - active: Currently running tasks (tick loops, pending debounces, API)
        - failed: Tasks that ended with exceptions
        - cancelled: Tasks that were cancelled
    """
    registry = TaskRegistry.instance()
    return {
        "summary": registry.summary(),
        "total": len(registry.list_all()),
        "active": len(registry.active()),
        "failed": len(registry.failed()),
        "cancelled": len(registry.cancelled())
    }


@router.get("/tasks")
async def get_all_tasks() -> Dict[str, Any]:
    """Every task the registry still holds, with its status."""
    records = TaskRegistry.instance().list_all()
    tasks = [
        {
            "id": r.info.id,
            "category": r.info.category.name,
            "description": r.info.description,
            "created_at": r.info.created_at,
            "created_by": r.info.created_by,
            "status": r.status,
            "error": str(r.finished_with_error) if r.finished_with_error else None,
        }
        for r in records
    ]
    return {"count": len(tasks), "tasks": tasks}

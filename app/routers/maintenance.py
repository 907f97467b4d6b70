"""Maintenance schedule endpoints."""

from __future__ import annotations

from typing import List

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_maintenance_repository, get_maintenance_service
from app.schemas import (
    Acknowledgement,
    Completion,
    CompletionCreate,
    MaintenanceTask,
    MaintenanceTaskCreate,
    MaintenanceTaskUpdate,
    ReminderReport,
    WebhookCheck,
)
from datastore.maintenance import MaintenanceRepository
from services.maintenance import MaintenanceService

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])

_NOT_FOUND = "Task not found"


@router.get(
    "/tasks",
    response_model=List[MaintenanceTask],
    summary="List tasks with their due status.",
)
async def list_tasks(
    service: MaintenanceService = Depends(get_maintenance_service),
) -> List[MaintenanceTask]:
    return service.list_tasks()


@router.post("/tasks", response_model=MaintenanceTask, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: MaintenanceTaskCreate,
    repository: MaintenanceRepository = Depends(get_maintenance_repository),
    service: MaintenanceService = Depends(get_maintenance_service),
) -> MaintenanceTask:
    task = repository.create(payload)
    return service.get_task(task.id)


@router.put("/tasks/{task_id}", response_model=MaintenanceTask)
async def update_task(
    task_id: str,
    payload: MaintenanceTaskUpdate,
    repository: MaintenanceRepository = Depends(get_maintenance_repository),
    service: MaintenanceService = Depends(get_maintenance_service),
) -> MaintenanceTask:
    try:
        repository.update(task_id, payload)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND) from exc
    return service.get_task(task_id)


@router.delete("/tasks/{task_id}", response_model=Acknowledgement)
async def delete_task(
    task_id: str,
    repository: MaintenanceRepository = Depends(get_maintenance_repository),
    service: MaintenanceService = Depends(get_maintenance_service),
) -> Acknowledgement:
    try:
        repository.delete(task_id)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND) from exc
    service.forget(task_id)
    return Acknowledgement()


@router.get("/tasks/{task_id}/completions", response_model=List[Completion])
async def list_completions(
    task_id: str,
    repository: MaintenanceRepository = Depends(get_maintenance_repository),
) -> List[Completion]:
    try:
        return repository.list_completions(task_id)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND) from exc


@router.post(
    "/tasks/{task_id}/completions",
    response_model=Completion,
    status_code=status.HTTP_201_CREATED,
    summary="Log that a task was done.",
)
async def add_completion(
    task_id: str,
    payload: CompletionCreate,
    repository: MaintenanceRepository = Depends(get_maintenance_repository),
) -> Completion:
    try:
        return repository.add_completion(task_id, payload)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND) from exc


@router.post(
    "/tasks/{task_id}/test-notification",
    response_model=WebhookCheck,
    summary="Call the task's notification URL once.",
)
async def test_notification(
    task_id: str,
    service: MaintenanceService = Depends(get_maintenance_service),
) -> WebhookCheck:
    try:
        return service.check_webhook(task_id)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to reach notification URL: {exc}",
        ) from exc


@router.post(
    "/reminders",
    response_model=ReminderReport,
    summary="Push a reminder for each task that became due.",
)
async def send_reminders(
    service: MaintenanceService = Depends(get_maintenance_service),
) -> ReminderReport:
    return service.send_reminders()

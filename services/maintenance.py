"""Maintenance schedule arithmetic and due-task reminders."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Callable, Dict, List, MutableMapping, Optional

import httpx

from app.schemas import MaintenanceTask, ReminderReport, WebhookCheck
from datastore.app_settings import SettingsStore
from datastore.database import utcnow
from datastore.maintenance import MaintenanceRepository
from services.alerts import PRIORITY_NORMAL
from services.notifier import NotificationGateway, NotificationPreferences

logger = logging.getLogger(__name__)


def with_schedule(task: MaintenanceTask, now: datetime) -> MaintenanceTask:
    """Fill in due status from the task's last completion.

    A task that has never been completed is due.  Otherwise it is due once
    the whole days elapsed since the last completion reach its interval.
    """
    last = task.last_completion
    if last is None:
        return task.model_copy(
            update={"is_due": True, "days_since_last": None, "days_until_due": None}
        )
    days_since = (now - last.completed_at).days
    return task.model_copy(
        update={
            "is_due": days_since >= task.interval_days,
            "days_since_last": days_since,
            "days_until_due": task.interval_days - days_since,
        }
    )


def reminder_message(task: MaintenanceTask) -> str:
    if task.days_since_last is None:
        return f"{task.name} has never been logged (every {task.interval_days} days)."
    return (
        f"{task.name} was last done {task.days_since_last} days ago "
        f"(every {task.interval_days} days)."
    )


class MaintenanceService:

    def __init__(
        self,
        repository: MaintenanceRepository,
        settings_store: SettingsStore,
        gateway: NotificationGateway,
        clock: Callable[[], datetime] = utcnow,
        reminded: Optional[MutableMapping[str, Optional[str]]] = None,
    ) -> None:
        self.repository = repository
        self.settings_store = settings_store
        self.gateway = gateway
        self._clock = clock
        # task id -> id of the completion the last reminder was sent after (None: never completed)
        self._reminded: MutableMapping[str, Optional[str]] = (
            reminded if reminded is not None else {}
        )

    def list_tasks(self) -> List[MaintenanceTask]:
        now = self._clock()
        return [with_schedule(task, now) for task in self.repository.list_tasks()]

    def get_task(self, task_id: str) -> MaintenanceTask:
        return with_schedule(self.repository.get_task(task_id), self._clock())

    def forget(self, task_id: str) -> None:
        self._reminded.pop(task_id, None)

    def send_reminders(self) -> ReminderReport:
        """Push one reminder per due task per due period."""
        preferences = NotificationPreferences.from_settings(self.settings_store.all())
        if not preferences.maintenance_enabled:
            return ReminderReport(skipped="Maintenance reminders are disabled.")
        notifier = self.gateway.notifier(preferences)
        if notifier is None:
            return ReminderReport(skipped="Pushover is not configured.")

        report = ReminderReport()
        for task in self.list_tasks():
            if not task.is_due:
                continue
            marker = task.last_completion.id if task.last_completion else None
            if task.id in self._reminded and self._reminded[task.id] == marker:
                continue
            result = notifier.send(
                f"Maintenance due: {task.name}", reminder_message(task), PRIORITY_NORMAL
            )
            if result.success:
                self._reminded[task.id] = marker
                report.sent.append(task.id)
            else:
                logger.warning(
                    "Maintenance reminder failed",
                    extra={"task_id": task.id, "error": result.error},
                )
                report.failed.append(task.id)

        if report.sent:
            logger.info("Sent %d maintenance reminder(s)", len(report.sent))
        return report

    def check_webhook(self, task_id: str) -> WebhookCheck:
        """GET the task's notification URL.

        Raises ``KeyError`` for an unknown task, ``ValueError`` when no URL is
        configured and ``httpx.HTTPError`` when the URL cannot be reached.
        """
        task = self.repository.get_task(task_id)
        if not task.notification_url:
            raise ValueError("No notification URL configured for this task")
        try:
            status_code = self.gateway.ping(task.notification_url)
        except httpx.HTTPError as exc:
            logger.warning(
                "Notification URL unreachable", extra={"task_id": task_id, "error": str(exc)}
            )
            raise
        return WebhookCheck(success=True, status=status_code)


@lru_cache
def build_default_reminder_log() -> Dict[str, Optional[str]]:
    """Process-wide record of which due periods were already reminded."""
    return {}

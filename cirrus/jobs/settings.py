"""Job settings as defined by the jobs API.

Two shapes coexist on the wire:

- legacy (single task): the task kind, cluster and retry settings sit
  directly on the job record;
- multi-task: a ``tasks`` list of keyed tasks with ``depends_on`` edges,
  optionally tagged with ``format = "MULTI_TASK"``.

Which one a job uses is derived from the record (see ``cirrus.jobs.graph``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from cirrus.constants import DEFAULT_JOB_NAME
from cirrus.jobs.tasks import (
    RetryPolicy,
    Task,
    TaskKind,
    freeze,
    kind_to_dict,
    omit_empty,
    parse_task_kind,
    thaw,
)

__all__ = [
    "CronSchedule",
    "EmailNotifications",
    "JobSettings",
    "Job",
]


@dataclass(frozen=True, slots=True)
class CronSchedule:
    """Quartz cron schedule of a job."""

    quartz_cron_expression: str
    timezone_id: str = "UTC"
    pause_status: str = ""

    def to_dict(self) -> dict[str, Any]:
        return omit_empty({
            "quartz_cron_expression": self.quartz_cron_expression,
            "timezone_id": self.timezone_id,
            "pause_status": self.pause_status,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CronSchedule:
        return cls(
            quartz_cron_expression=str(data["quartz_cron_expression"]),
            timezone_id=str(data.get("timezone_id", "UTC")),
            pause_status=str(data.get("pause_status", "")),
        )


@dataclass(frozen=True, slots=True)
class EmailNotifications:
    on_start: tuple[str, ...] = ()
    on_success: tuple[str, ...] = ()
    on_failure: tuple[str, ...] = ()
    no_alert_for_skipped_runs: bool = False

    def to_dict(self) -> dict[str, Any]:
        return omit_empty({
            "on_start": list(self.on_start),
            "on_success": list(self.on_success),
            "on_failure": list(self.on_failure),
            "no_alert_for_skipped_runs": self.no_alert_for_skipped_runs,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EmailNotifications:
        return cls(
            on_start=tuple(data.get("on_start") or ()),
            on_success=tuple(data.get("on_success") or ()),
            on_failure=tuple(data.get("on_failure") or ()),
            no_alert_for_skipped_runs=bool(data.get("no_alert_for_skipped_runs", False)),
        )


@dataclass(frozen=True, slots=True)
class JobSettings:
    """Definition of a job, legacy or multi-task.

    ``legacy_task``, ``existing_cluster_id``, ``new_cluster`` and ``retry``
    only apply to legacy jobs; multi-task jobs carry them per task.
    """

    name: str = DEFAULT_JOB_NAME
    tasks: tuple[Task, ...] = ()
    format: str = ""
    legacy_task: TaskKind | None = None
    existing_cluster_id: str = ""
    new_cluster: Mapping[str, Any] | None = field(default=None, hash=False)
    libraries: tuple[Mapping[str, Any], ...] = field(default=(), hash=False)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    schedule: CronSchedule | None = None
    max_concurrent_runs: int = 0
    email_notifications: EmailNotifications | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "new_cluster", freeze(self.new_cluster))
        object.__setattr__(self, "libraries", freeze(self.libraries))

    def to_dict(self) -> dict[str, Any]:
        data = omit_empty({
            "name": self.name,
            "tasks": [task.to_dict() for task in self.tasks],
            "format": self.format,
            "existing_cluster_id": self.existing_cluster_id,
            "new_cluster": thaw(self.new_cluster),
            "libraries": thaw(self.libraries),
            "schedule": self.schedule.to_dict() if self.schedule else None,
            "max_concurrent_runs": self.max_concurrent_runs,
            "email_notifications": (
                self.email_notifications.to_dict() if self.email_notifications else None
            ),
        })
        return data | kind_to_dict(self.legacy_task) | self.retry.to_dict()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JobSettings:
        """Parse a job settings record.

        Task kinds are parsed strictly: a task (or legacy job) that sets several
        kinds raises AmbiguousTaskPayloadError here. A legacy job with no kind
        is accepted and reported by validation instead.
        """
        tasks = tuple(Task.from_dict(raw) for raw in data.get("tasks") or ())
        schedule = data.get("schedule")
        notifications = data.get("email_notifications")
        return cls(
            name=str(data.get("name") or DEFAULT_JOB_NAME),
            tasks=tasks,
            format=str(data.get("format", "")),
            legacy_task=parse_task_kind(data, required=False),
            existing_cluster_id=str(data.get("existing_cluster_id", "")),
            new_cluster=data.get("new_cluster") or None,
            libraries=tuple(data.get("libraries") or ()),
            retry=RetryPolicy.from_dict(data),
            schedule=CronSchedule.from_dict(schedule) if schedule else None,
            max_concurrent_runs=int(data.get("max_concurrent_runs", 0)),
            email_notifications=EmailNotifications.from_dict(notifications) if notifications else None,
        )


@dataclass(frozen=True, slots=True)
class Job:
    """Job as returned by the jobs get/list calls."""

    job_id: int
    settings: JobSettings | None = None
    creator_user_name: str = ""
    created_time: int = 0

    @property
    def id(self) -> str:
        return str(self.job_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Job:
        settings = data.get("settings")
        return cls(
            job_id=int(data.get("job_id", 0)),
            settings=JobSettings.from_dict(settings) if settings else None,
            creator_user_name=str(data.get("creator_user_name", "")),
            created_time=int(data.get("created_time", 0)),
        )

"""Jobs - task kinds, job settings and task graph validation."""

from cirrus.jobs.graph import JobMode, ValidatedJob, job_mode, sort_tasks_by_key, validate_job
from cirrus.jobs.settings import CronSchedule, EmailNotifications, Job, JobSettings
from cirrus.jobs.tasks import (
    TASK_KINDS,
    NotebookTask,
    PipelineTask,
    PythonWheelTask,
    RetryPolicy,
    SparkJarTask,
    SparkPythonTask,
    SparkSubmitTask,
    Task,
    TaskKind,
    parse_task_kind,
)

__all__ = [
    # Task kinds
    "NotebookTask",
    "SparkPythonTask",
    "SparkJarTask",
    "SparkSubmitTask",
    "PythonWheelTask",
    "PipelineTask",
    "TaskKind",
    "TASK_KINDS",
    "parse_task_kind",
    # Tasks and jobs
    "RetryPolicy",
    "Task",
    "CronSchedule",
    "EmailNotifications",
    "JobSettings",
    "Job",
    # Graph
    "JobMode",
    "ValidatedJob",
    "job_mode",
    "sort_tasks_by_key",
    "validate_job",
]

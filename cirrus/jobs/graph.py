"""Job task graph: mode detection and structural validation.

A multi-task job is a DAG over task keys. Before a job definition is
submitted, ``validate_job`` checks that:

- every task has a non-empty, unique key;
- every ``depends_on`` entry names a task of the same job;
- the dependencies are acyclic;
- every task carries exactly one task kind.

Validation either returns a ``ValidatedJob`` or raises a
``GraphIntegrityError`` subtype; nothing is submitted or mutated.

Example:
    settings = JobSettings.from_dict(payload)
    job = validate_job(settings)
    for task in job.tasks:          # ordered by task key
        print(task.task_key, job.dependencies(task.task_key))
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from cirrus.constants import MULTI_TASK_FORMAT
from cirrus.core.exceptions import (
    AmbiguousTaskPayloadError,
    CyclicDependencyError,
    DanglingDependencyError,
    DuplicateTaskKeyError,
    MissingTaskKeyError,
)
from cirrus.jobs.settings import JobSettings
from cirrus.jobs.tasks import Task

__all__ = [
    "JobMode",
    "ValidatedJob",
    "job_mode",
    "sort_tasks_by_key",
    "validate_job",
]


class JobMode(StrEnum):
    """Shape of a job definition."""

    LEGACY = "LEGACY"
    MULTI_TASK = "MULTI_TASK"


def job_mode(settings: JobSettings) -> JobMode:
    """Multi-task iff the job has tasks or is explicitly marked as such."""
    if settings.tasks or settings.format == MULTI_TASK_FORMAT:
        return JobMode.MULTI_TASK
    return JobMode.LEGACY


def sort_tasks_by_key(tasks: Iterable[Task]) -> list[Task]:
    """Tasks in ascending key order.

    For stable display and comparison only; execution order is decided by
    the remote job engine from ``depends_on``.
    """
    return sorted(tasks, key=lambda task: task.task_key)


@dataclass(frozen=True, slots=True)
class ValidatedJob:
    """A structurally valid job, ready for submission.

    ``tasks`` are ordered by key. Dependency lookups are by task key.
    """

    settings: JobSettings
    mode: JobMode
    tasks: tuple[Task, ...] = ()
    _by_key: Mapping[str, Task] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False,
    )

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(task.task_key for task in self.tasks)

    @property
    def edges(self) -> frozenset[tuple[str, str]]:
        """(task, dependency) pairs."""
        return frozenset(
            (task.task_key, dep) for task in self.tasks for dep in task.depends_on
        )

    def task(self, key: str) -> Task:
        return self._by_key[key]

    def dependencies(self, key: str) -> tuple[str, ...]:
        return self._by_key[key].depends_on

    def dependents(self, key: str) -> tuple[str, ...]:
        """Keys of the tasks that depend on ``key``, in key order."""
        if key not in self._by_key:
            raise KeyError(key)
        return tuple(task.task_key for task in self.tasks if key in task.depends_on)


def _check_keys(tasks: tuple[Task, ...]) -> dict[str, Task]:
    by_key: dict[str, Task] = {}
    for position, task in enumerate(tasks):
        if not task.task_key:
            raise MissingTaskKeyError(position)
        if task.task_key in by_key:
            raise DuplicateTaskKeyError(task.task_key)
        by_key[task.task_key] = task
    return by_key


def _check_references(tasks: tuple[Task, ...], by_key: Mapping[str, Task]) -> None:
    for task in tasks:
        for dep in task.depends_on:
            if dep not in by_key:
                raise DanglingDependencyError(task.task_key, dep)


def _check_acyclic(by_key: Mapping[str, Task]) -> None:
    done: set[str] = set()
    for root in sorted(by_key):
        if root in done:
            continue
        # Insertion-ordered, so the current path can be read back as a cycle.
        path: dict[str, None] = {root: None}
        stack = [(root, iter(by_key[root].depends_on))]
        while stack:
            key, deps = stack[-1]
            dep = next(deps, None)
            if dep is None:
                stack.pop()
                del path[key]
                done.add(key)
            elif dep in path:
                keys = list(path)
                raise CyclicDependencyError(dep, [*keys[keys.index(dep):], dep])
            elif dep not in done:
                path[dep] = None
                stack.append((dep, iter(by_key[dep].depends_on)))


def validate_job(settings: JobSettings) -> ValidatedJob:
    """Validate the task graph of a job.

    Args:
        settings: Job definition, legacy or multi-task.

    Returns:
        Immutable validated view of the job.

    Raises:
        MissingTaskKeyError: A task has an empty key.
        DuplicateTaskKeyError: Two tasks share a key.
        AmbiguousTaskPayloadError: A legacy job has no task kind.
        DanglingDependencyError: A dependency names an unknown task.
        CyclicDependencyError: Dependencies form a cycle.
    """
    mode = job_mode(settings)
    if mode is JobMode.LEGACY:
        if settings.legacy_task is None:
            raise AmbiguousTaskPayloadError("")
        return ValidatedJob(settings=settings, mode=mode)

    by_key = _check_keys(settings.tasks)
    _check_references(settings.tasks, by_key)
    _check_acyclic(by_key)

    return ValidatedJob(
        settings=settings,
        mode=mode,
        tasks=tuple(sort_tasks_by_key(settings.tasks)),
        _by_key=MappingProxyType(by_key),
    )

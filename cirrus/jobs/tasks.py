"""Job tasks and task kinds.

On the wire a task carries one optional field per task kind
(``notebook_task``, ``spark_python_task``, ...) of which exactly one must be
set. Locally a task holds a single ``kind`` value instead, so a task with
zero or several kinds cannot be constructed; the check happens once, when
the wire record is parsed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Final

from cirrus.core.exceptions import AmbiguousTaskPayloadError

__all__ = [
    "NotebookTask",
    "SparkPythonTask",
    "SparkJarTask",
    "SparkSubmitTask",
    "PythonWheelTask",
    "PipelineTask",
    "TaskKind",
    "TASK_KINDS",
    "freeze",
    "thaw",
    "RetryPolicy",
    "Task",
    "kind_to_dict",
    "omit_empty",
    "parse_task_kind",
]


def omit_empty(data: dict[str, Any]) -> dict[str, Any]:
    """Drop empty values, mirroring ``omitempty`` on the wire."""
    return {k: v for k, v in data.items() if v not in (None, "", 0, False, [], {}, ())}


def _strings(raw: Any) -> tuple[str, ...]:
    return tuple(str(v) for v in raw or ())


def _string_map(raw: Any) -> dict[str, str]:
    return {str(k): str(v) for k, v in (raw or {}).items()}


def freeze(value: Any) -> Any:
    """Read-only copy of a JSON-like value: mappings become proxies, lists tuples."""
    match value:
        case Mapping():
            return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
        case list() | tuple():
            return tuple(freeze(v) for v in value)
        case _:
            return value


def thaw(value: Any) -> Any:
    """Plain dicts and lists again, for serialization."""
    match value:
        case Mapping():
            return {k: thaw(v) for k, v in value.items()}
        case list() | tuple():
            return [thaw(v) for v in value]
        case _:
            return value


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


# =============================================================================
# Task Kinds
# =============================================================================


@dataclass(frozen=True, slots=True)
class NotebookTask:
    """Run a workspace notebook."""

    wire_field: ClassVar[str] = "notebook_task"

    notebook_path: str
    base_parameters: Mapping[str, str] = field(default_factory=_empty_mapping, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_parameters", freeze(self.base_parameters))

    def to_dict(self) -> dict[str, Any]:
        return {"notebook_path": self.notebook_path} | omit_empty({
            "base_parameters": dict(self.base_parameters),
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NotebookTask:
        return cls(
            notebook_path=str(data.get("notebook_path", "")),
            base_parameters=_string_map(data.get("base_parameters")),
        )


@dataclass(frozen=True, slots=True)
class SparkPythonTask:
    """Run a Python script."""

    wire_field: ClassVar[str] = "spark_python_task"

    python_file: str
    parameters: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"python_file": self.python_file} | omit_empty({"parameters": list(self.parameters)})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SparkPythonTask:
        return cls(
            python_file=str(data.get("python_file", "")),
            parameters=_strings(data.get("parameters")),
        )


@dataclass(frozen=True, slots=True)
class SparkJarTask:
    """Run the main class of a JAR."""

    wire_field: ClassVar[str] = "spark_jar_task"

    main_class_name: str = ""
    jar_uri: str = ""
    parameters: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return omit_empty({
            "jar_uri": self.jar_uri,
            "main_class_name": self.main_class_name,
            "parameters": list(self.parameters),
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SparkJarTask:
        return cls(
            main_class_name=str(data.get("main_class_name", "")),
            jar_uri=str(data.get("jar_uri", "")),
            parameters=_strings(data.get("parameters")),
        )


@dataclass(frozen=True, slots=True)
class SparkSubmitTask:
    """Run spark-submit with raw arguments."""

    wire_field: ClassVar[str] = "spark_submit_task"

    parameters: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return omit_empty({"parameters": list(self.parameters)})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SparkSubmitTask:
        return cls(parameters=_strings(data.get("parameters")))


@dataclass(frozen=True, slots=True)
class PythonWheelTask:
    """Run an entry point of a packaged Python wheel."""

    wire_field: ClassVar[str] = "python_wheel_task"

    package_name: str = ""
    entry_point: str = ""
    parameters: tuple[str, ...] = ()
    named_parameters: Mapping[str, str] = field(default_factory=_empty_mapping, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "named_parameters", freeze(self.named_parameters))

    def to_dict(self) -> dict[str, Any]:
        return omit_empty({
            "package_name": self.package_name,
            "entry_point": self.entry_point,
            "parameters": list(self.parameters),
            "named_parameters": dict(self.named_parameters),
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PythonWheelTask:
        return cls(
            package_name=str(data.get("package_name", "")),
            entry_point=str(data.get("entry_point", "")),
            parameters=_strings(data.get("parameters")),
            named_parameters=_string_map(data.get("named_parameters")),
        )


@dataclass(frozen=True, slots=True)
class PipelineTask:
    """Trigger an update of a pipeline."""

    wire_field: ClassVar[str] = "pipeline_task"

    pipeline_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"pipeline_id": self.pipeline_id}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PipelineTask:
        return cls(pipeline_id=str(data.get("pipeline_id", "")))


type TaskKind = (
    NotebookTask
    | SparkPythonTask
    | SparkJarTask
    | SparkSubmitTask
    | PythonWheelTask
    | PipelineTask
)

TASK_KINDS: Final = (
    NotebookTask,
    SparkPythonTask,
    SparkJarTask,
    SparkSubmitTask,
    PythonWheelTask,
    PipelineTask,
)

_KIND_BY_FIELD: Final = {kind.wire_field: kind for kind in TASK_KINDS}


def parse_task_kind(
    data: Mapping[str, Any],
    owner: str = "",
    *,
    required: bool = True,
) -> TaskKind | None:
    """Read the single task kind set on a wire record.

    Args:
        data: Task (or legacy job) record with one field per task kind.
        owner: Task key used in error messages; empty for a legacy job.
        required: Whether a record without any task kind is an error.

    Returns:
        The parsed task kind, or None if none is set and not required.

    Raises:
        AmbiguousTaskPayloadError: If several kinds are set, or none while required.
    """
    present = [name for name in _KIND_BY_FIELD if data.get(name) is not None]
    match present:
        case [name]:
            return _KIND_BY_FIELD[name].from_dict(data[name])
        case []:
            if required:
                raise AmbiguousTaskPayloadError(owner)
            return None
        case _:
            raise AmbiguousTaskPayloadError(owner, present)


def kind_to_dict(kind: TaskKind | None) -> dict[str, Any]:
    """Wire fields for a task kind: ``{"notebook_task": {...}}``."""
    if kind is None:
        return {}
    return {kind.wire_field: kind.to_dict()}


# =============================================================================
# Tasks
# =============================================================================


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Timeout and retry settings of a task or legacy job."""

    max_retries: int = 0
    min_retry_interval_millis: int = 0
    retry_on_timeout: bool = False
    timeout_seconds: int = 0

    def to_dict(self) -> dict[str, Any]:
        return omit_empty({
            "max_retries": self.max_retries,
            "min_retry_interval_millis": self.min_retry_interval_millis,
            "retry_on_timeout": self.retry_on_timeout,
            "timeout_seconds": self.timeout_seconds,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RetryPolicy:
        return cls(
            max_retries=int(data.get("max_retries", 0)),
            min_retry_interval_millis=int(data.get("min_retry_interval_millis", 0)),
            retry_on_timeout=bool(data.get("retry_on_timeout", False)),
            timeout_seconds=int(data.get("timeout_seconds", 0)),
        )


@dataclass(frozen=True, slots=True)
class Task:
    """One unit of work in a multi-task job.

    ``depends_on`` holds the keys of tasks that must finish first.
    """

    task_key: str
    kind: TaskKind
    depends_on: tuple[str, ...] = ()
    description: str = ""
    existing_cluster_id: str = ""
    new_cluster: Mapping[str, Any] | None = field(default=None, hash=False)
    libraries: tuple[Mapping[str, Any], ...] = field(default=(), hash=False)
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, TASK_KINDS):
            raise TypeError(f"Task kind must be one of {[k.__name__ for k in TASK_KINDS]}")
        object.__setattr__(self, "new_cluster", freeze(self.new_cluster))
        object.__setattr__(self, "libraries", freeze(self.libraries))

    def to_dict(self) -> dict[str, Any]:
        return (
            omit_empty({
                "task_key": self.task_key,
                "description": self.description,
                "depends_on": [{"task_key": key} for key in self.depends_on],
                "existing_cluster_id": self.existing_cluster_id,
                "new_cluster": thaw(self.new_cluster),
                "libraries": thaw(self.libraries),
            })
            | kind_to_dict(self.kind)
            | self.retry.to_dict()
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Task:
        task_key = str(data.get("task_key", ""))
        return cls(
            task_key=task_key,
            kind=parse_task_kind(data, task_key),  # type: ignore[arg-type]
            depends_on=_dependency_keys(data.get("depends_on")),
            description=str(data.get("description", "")),
            existing_cluster_id=str(data.get("existing_cluster_id", "")),
            new_cluster=data.get("new_cluster") or None,
            libraries=tuple(data.get("libraries") or ()),
            retry=RetryPolicy.from_dict(data),
        )


def _dependency_keys(raw: Sequence[Mapping[str, Any] | str] | None) -> tuple[str, ...]:
    keys: list[str] = []
    for dep in raw or ():
        match dep:
            case str():
                keys.append(dep)
            case Mapping():
                keys.append(str(dep.get("task_key", "")))
            case _:
                raise TypeError(f"Invalid depends_on entry: {dep!r}")
    return tuple(keys)

import pytest

from cirrus.core.exceptions import (
    AmbiguousTaskPayloadError,
    CyclicDependencyError,
    DanglingDependencyError,
    DuplicateTaskKeyError,
    GraphIntegrityError,
    MissingTaskKeyError,
)
from cirrus.jobs.graph import JobMode, job_mode, sort_tasks_by_key, validate_job
from cirrus.jobs.settings import JobSettings
from cirrus.jobs.tasks import NotebookTask, PipelineTask, SparkPythonTask, Task

pytestmark = [pytest.mark.xdist_group("unit")]


def _task(key: str, *depends_on: str) -> Task:
    return Task(task_key=key, kind=NotebookTask(f"/jobs/{key}"), depends_on=depends_on)


def _job(*tasks: Task) -> JobSettings:
    return JobSettings(name="etl", tasks=tasks)


class TestJobMode:
    def test_no_tasks_no_format_is_legacy(self):
        assert job_mode(JobSettings(legacy_task=NotebookTask("/a"))) is JobMode.LEGACY

    def test_single_task_is_multi_task(self):
        assert job_mode(_job(_task("only"))) is JobMode.MULTI_TASK

    def test_format_marker_is_multi_task(self):
        assert job_mode(JobSettings(format="MULTI_TASK")) is JobMode.MULTI_TASK

    def test_single_task_format_marker_is_legacy(self):
        settings = JobSettings(format="SINGLE_TASK", legacy_task=PipelineTask("p-1"))
        assert job_mode(settings) is JobMode.LEGACY


class TestValidateJob:
    def test_valid_dag(self):
        job = validate_job(_job(_task("c", "a", "b"), _task("b", "a"), _task("a")))
        assert job.mode is JobMode.MULTI_TASK
        assert job.keys == ("a", "b", "c")
        assert job.dependencies("c") == ("a", "b")
        assert job.dependents("a") == ("b", "c")
        assert job.dependents("c") == ()

    def test_reordering_by_key_keeps_every_edge(self):
        settings = _job(_task("load", "transform"), _task("transform", "extract"), _task("extract"))
        job = validate_job(settings)
        original_edges = {(t.task_key, d) for t in settings.tasks for d in t.depends_on}
        assert [t.task_key for t in job.tasks] == ["extract", "load", "transform"]
        assert job.edges == original_edges

    def test_input_is_not_mutated(self):
        settings = _job(_task("b"), _task("a"))
        validate_job(settings)
        assert [t.task_key for t in settings.tasks] == ["b", "a"]

    def test_two_task_cycle(self):
        with pytest.raises(CyclicDependencyError) as exc_info:
            validate_job(_job(_task("a", "b"), _task("b", "a")))
        assert exc_info.value.task_key in {"a", "b"}
        assert set(exc_info.value.cycle) == {"a", "b"}

    def test_self_dependency_is_a_cycle(self):
        with pytest.raises(CyclicDependencyError, match="'x'"):
            validate_job(_job(_task("x", "x")))

    def test_longer_cycle_reports_path(self):
        with pytest.raises(CyclicDependencyError) as exc_info:
            validate_job(_job(_task("a"), _task("b", "a", "d"), _task("c", "b"), _task("d", "c")))
        cycle = exc_info.value.cycle
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"b", "c", "d"}

    def test_deep_chain_is_validated_without_recursion(self):
        depth = 5000
        tasks = [_task(f"t{i:05d}", f"t{i + 1:05d}") for i in range(depth - 1)]
        tasks.append(_task(f"t{depth - 1:05d}"))
        job = validate_job(_job(*tasks))
        assert len(job.tasks) == depth
        assert job.dependencies("t00000") == ("t00001",)

    def test_cycle_at_the_end_of_a_deep_chain(self):
        depth = 3000
        tasks = [_task(f"t{i:05d}", f"t{i + 1:05d}") for i in range(depth - 1)]
        tasks.append(_task(f"t{depth - 1:05d}", f"t{depth - 2:05d}"))
        with pytest.raises(CyclicDependencyError) as exc_info:
            validate_job(_job(*tasks))
        assert exc_info.value.cycle == (f"t{depth - 2:05d}", f"t{depth - 1:05d}", f"t{depth - 2:05d}")

    def test_diamond_is_not_a_cycle(self):
        job = validate_job(_job(_task("a"), _task("b", "a"), _task("c", "a"), _task("d", "b", "c")))
        assert len(job.edges) == 4

    def test_dangling_dependency(self):
        with pytest.raises(DanglingDependencyError) as exc_info:
            validate_job(_job(_task("a"), _task("b", "a"), _task("c", "z")))
        assert exc_info.value.task_key == "c"
        assert exc_info.value.dependency == "z"
        assert "'z'" in str(exc_info.value)

    def test_duplicate_key(self):
        with pytest.raises(DuplicateTaskKeyError) as exc_info:
            validate_job(_job(_task("a"), _task("b"), _task("a")))
        assert exc_info.value.task_key == "a"

    def test_empty_key(self):
        with pytest.raises(MissingTaskKeyError) as exc_info:
            validate_job(_job(_task("a"), _task("")))
        assert exc_info.value.position == 1

    def test_errors_share_a_base(self):
        with pytest.raises(GraphIntegrityError):
            validate_job(_job(_task("a", "missing")))

    def test_multi_task_marker_without_tasks(self):
        job = validate_job(JobSettings(format="MULTI_TASK"))
        assert job.mode is JobMode.MULTI_TASK
        assert job.tasks == ()

    def test_legacy_job(self):
        settings = JobSettings(legacy_task=SparkPythonTask("dbfs:/main.py"), existing_cluster_id="c-1")
        job = validate_job(settings)
        assert job.mode is JobMode.LEGACY
        assert job.settings is settings
        assert job.tasks == ()

    def test_legacy_job_without_task_kind(self):
        with pytest.raises(AmbiguousTaskPayloadError, match="Job sets no task kind"):
            validate_job(JobSettings(existing_cluster_id="c-1"))

    def test_unknown_task_lookup(self):
        job = validate_job(_job(_task("a")))
        with pytest.raises(KeyError):
            job.task("nope")
        with pytest.raises(KeyError):
            job.dependents("nope")


class TestValidateWireJob:
    def test_multi_task_payload(self):
        settings = JobSettings.from_dict({
            "name": "nightly",
            "format": "MULTI_TASK",
            "max_concurrent_runs": 1,
            "schedule": {"quartz_cron_expression": "0 0 2 * * ?", "timezone_id": "Europe/Berlin"},
            "tasks": [
                {
                    "task_key": "report",
                    "depends_on": [{"task_key": "ingest"}],
                    "notebook_task": {"notebook_path": "/reports/daily"},
                    "existing_cluster_id": "c-1",
                },
                {
                    "task_key": "ingest",
                    "python_wheel_task": {"package_name": "etl", "entry_point": "ingest"},
                    "new_cluster": {"spark_version": "13.3.x-scala2.12", "num_workers": 2},
                    "max_retries": 3,
                },
            ],
        })
        job = validate_job(settings)
        assert job.keys == ("ingest", "report")
        assert job.task("ingest").retry.max_retries == 3
        assert job.edges == {("report", "ingest")}

    def test_task_with_two_kinds_is_rejected(self):
        with pytest.raises(AmbiguousTaskPayloadError) as exc_info:
            JobSettings.from_dict({
                "tasks": [
                    {
                        "task_key": "both",
                        "notebook_task": {"notebook_path": "/a"},
                        "spark_python_task": {"python_file": "b.py"},
                    }
                ]
            })
        assert exc_info.value.task_key == "both"
        assert exc_info.value.kinds == ("notebook_task", "spark_python_task")


class TestSortTasksByKey:
    def test_sorts_without_dropping_dependencies(self):
        tasks = [_task("b", "a"), _task("c", "b"), _task("a")]
        ordered = sort_tasks_by_key(tasks)
        assert [t.task_key for t in ordered] == ["a", "b", "c"]
        assert {t.task_key: t.depends_on for t in ordered} == {
            "a": (),
            "b": ("a",),
            "c": ("b",),
        }

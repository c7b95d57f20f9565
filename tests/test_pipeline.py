import pytest

from node_provisioner.lib.command import CommandError
from node_provisioner.lib.users import TargetUser
from node_provisioner.pipeline import RunContext, StepStatus, run_pipeline


class FakeStep:
    def __init__(self, step_id, *, error=None, status=StepStatus.RAN, best_effort=False, log=None):
        self.step_id = step_id
        self.description = f"step {step_id}"
        self.best_effort = best_effort
        self.error = error
        self.status = status
        self.log = log if log is not None else []

    def run(self, ctx):
        self.log.append(self.step_id)
        if self.error is not None:
            raise self.error
        return self.status


@pytest.fixture
def ctx(tmp_path):
    return RunContext(config=None, user=TargetUser("alice", 1000, 1000, tmp_path))


def test_steps_run_in_order(ctx):
    log = []
    steps = [FakeStep(s, log=log) for s in ("a", "b", "c")]

    result = run_pipeline(ctx=ctx, steps=steps)

    assert log == ["a", "b", "c"]
    assert result.ran_steps == ["a", "b", "c"]
    assert result.succeeded and result.exit_code == 0


def test_fatal_failure_halts(ctx):
    log = []
    steps = [
        FakeStep("a", log=log),
        FakeStep("b", log=log, error=CommandError(["kubeadm", "init"], 3, "boom")),
        FakeStep("c", log=log),
    ]

    result = run_pipeline(ctx=ctx, steps=steps)

    assert log == ["a", "b"]
    assert result.failure.step_id == "b"
    assert result.exit_code == 3
    assert result.summary()["failed_step"] == "b"
    assert "kubeadm init" in result.summary()["error"]


def test_non_command_errors_exit_one(ctx):
    result = run_pipeline(ctx=ctx, steps=[FakeStep("a", error=FileNotFoundError("admin.conf"))])

    assert result.exit_code == 1


def test_best_effort_failure_continues(ctx):
    log = []
    steps = [
        FakeStep("a", log=log, error=CommandError(["kubectl"], 1), best_effort=True),
        FakeStep("b", log=log),
    ]

    result = run_pipeline(ctx=ctx, steps=steps)

    assert log == ["a", "b"]
    assert result.ignored_steps == ["a"]
    assert result.succeeded


def test_skipped_steps_are_reported(ctx):
    result = run_pipeline(ctx=ctx, steps=[FakeStep("a", status=StepStatus.SKIPPED), FakeStep("b")])

    assert result.skipped_steps == ["a"]
    assert result.ran_steps == ["b"]


def test_start_at_stop_after(ctx):
    log = []
    steps = [FakeStep(s, log=log) for s in ("a", "b", "c", "d")]

    run_pipeline(ctx=ctx, steps=steps, start_at="b", stop_after="c")

    assert log == ["b", "c"]


def test_unknown_step_name_is_rejected(ctx):
    with pytest.raises(ValueError, match="Unknown step for start_at"):
        run_pipeline(ctx=ctx, steps=[FakeStep("a")], start_at="zz")

"""Tests for the a2awatch CLI commands."""

import pytest
from typer.testing import CliRunner

from a2awatch.a2a.errors import TaskNotFoundError
from a2awatch.a2a.models import TaskStatus
from a2awatch.cli import context
from a2awatch.cli.main import app
from tests.conftest import FakeProtocolClient, make_task

runner = CliRunner()


@pytest.fixture
def use_client(monkeypatch):
    def _install(client: FakeProtocolClient) -> FakeProtocolClient:
        monkeypatch.setattr(context, "build_client", lambda: client)
        return client
    return _install


def test_get(use_client):
    client = use_client(FakeProtocolClient([make_task(TaskStatus.RUNNING, task_id="t1")]))
    result = runner.invoke(app, ["get", "summarizer", "t1"])
    assert result.exit_code == 0
    assert "t1" in result.output
    assert "running" in result.output
    assert client.closed


def test_get_missing_task(use_client):
    use_client(FakeProtocolClient([TaskNotFoundError("Task not found: t9")]))
    result = runner.invoke(app, ["get", "summarizer", "t9"])
    assert result.exit_code == 1
    assert "Task not found" in result.output


def test_list_with_status(use_client):
    client = use_client(FakeProtocolClient([
        make_task(TaskStatus.RUNNING, task_id="r1"),
        make_task(TaskStatus.SUCCEEDED, task_id="s1"),
    ]))
    result = runner.invoke(app, ["list", "summarizer", "--status", "running"])
    assert result.exit_code == 0
    assert "r1" in result.output
    assert "s1" not in result.output
    assert client.calls[-1]["filters"] == {"status": "running"}


def test_list_empty(use_client):
    use_client(FakeProtocolClient([TaskNotFoundError()]))
    result = runner.invoke(app, ["list", "summarizer"])
    assert result.exit_code == 0
    assert "No tasks" in result.output


def test_cancel(use_client):
    use_client(FakeProtocolClient())
    result = runner.invoke(app, ["cancel", "summarizer", "t1"])
    assert result.exit_code == 0
    assert "cancelled" in result.output


def test_wait_success(use_client):
    use_client(FakeProtocolClient([make_task(TaskStatus.RUNNING), make_task(TaskStatus.SUCCEEDED)]))
    result = runner.invoke(app, ["wait", "summarizer", "task-1", "--interval", "0.01"])
    assert result.exit_code == 0
    assert "succeeded" in result.output


def test_wait_failed_task_exits_nonzero(use_client):
    use_client(FakeProtocolClient([make_task(TaskStatus.FAILED)]))
    result = runner.invoke(app, ["wait", "summarizer", "task-1", "--interval", "0.01"])
    assert result.exit_code == 1
    assert "failed" in result.output


def test_wait_timeout(use_client):
    use_client(FakeProtocolClient([make_task(TaskStatus.RUNNING)]))
    result = runner.invoke(
        app, ["wait", "summarizer", "task-1", "--interval", "0.01", "--timeout", "0.05"],
    )
    assert result.exit_code == 1
    assert "did not finish" in result.output


def test_card(use_client):
    use_client(FakeProtocolClient())
    result = runner.invoke(app, ["card", "summarizer"])
    assert result.exit_code == 0
    assert "Summarizer" in result.output

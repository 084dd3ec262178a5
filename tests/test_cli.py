from __future__ import annotations

import pytest

from conftest import py_exit, py_print
from parexec import cli as cli_module
from parexec.cli import cli


def test_run_two_groups_end_to_end(cli_runner, write_config):
    path = write_config({"functions": [
        {"execdata": [py_print("a")]},
        {"execdata": [py_print("b"), py_print("c")]},
    ]})

    result = cli_runner.invoke(cli, ["run", "--config", str(path), "--workers", "2"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "a" in lines
    assert lines.index("b") < lines.index("c")
    assert result.output.count("executing ") == 3


def test_failed_action_does_not_stop_group_or_exit_code(cli_runner, write_config):
    path = write_config({"functions": [
        {"execdata": [py_exit(1, name="boom"), py_print("ok")]},
    ]})

    result = cli_runner.invoke(cli, ["run", "--config", str(path), "--workers", "1"])

    assert result.exit_code == 0, result.output
    assert "STEP FAILED: boom" in result.output
    assert "Exit code: 1" in result.output
    assert "ok" in result.output.splitlines()


def test_missing_program_is_reported_inline(cli_runner, write_config):
    path = write_config({"functions": [
        {"execdata": [{"cmd": "parexec-definitely-not-a-program"}, py_print("after")]},
    ]})

    result = cli_runner.invoke(cli, ["run", "--config", str(path)])

    assert result.exit_code == 0, result.output
    assert "STEP FAILED: parexec-definitely-not-a-program" in result.output
    assert "after" in result.output.splitlines()


@pytest.fixture
def no_pool(monkeypatch):
    """Fail the test if the CLI ever builds a worker pool."""

    def _boom(*args, **kwargs):
        raise AssertionError("Coordinator must not be created")

    monkeypatch.setattr(cli_module, "Coordinator", _boom)


def test_malformed_config_exits_before_any_worker(cli_runner, write_config, no_pool):
    path = write_config({"functions": [{"execdata": [{"name": "no cmd", "args": []}]}]})

    result = cli_runner.invoke(cli, ["run", "--config", str(path)])

    assert result.exit_code == 1
    assert "ERROR: Failed to load config" in result.output
    assert "executing" not in result.output


def test_unreadable_config_exits_before_any_worker(cli_runner, tmp_path, no_pool):
    result = cli_runner.invoke(cli, ["run", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
    assert "Could not read config" in result.output


def test_workers_must_be_positive(cli_runner, write_config):
    path = write_config({"functions": []})
    result = cli_runner.invoke(cli, ["run", "--config", str(path), "--workers", "0"])
    assert result.exit_code == 2


def test_print_plan_and_debug(cli_runner, write_config):
    path = write_config({"functions": [{"execdata": [py_print("x", name="say x")]}]})

    result = cli_runner.invoke(cli, ["--debug", "run", "--config", str(path), "--workers", "1", "--print-plan"])

    assert result.exit_code == 0, result.output
    assert "group-0 (1 action(s))" in result.output
    assert "RUN STARTED" in result.output
    assert "Workers: 1" in result.output
    assert "[DEBUG] worker-0 finished group-0" in result.output


def test_validate_prints_plan(cli_runner, write_config):
    path = write_config({"functions": [
        {"execdata": [{"name": "echoing", "cmd": "echo", "args": ["hi there"]}]},
    ]})

    result = cli_runner.invoke(cli, ["validate", "--config", str(path)])

    assert result.exit_code == 0, result.output
    assert "echoing: echo 'hi there'" in result.output
    assert "executing" not in result.output


def test_validate_bad_config(cli_runner, write_config):
    result = cli_runner.invoke(cli, ["validate", "--config", str(write_config("functions: 3"))])
    assert result.exit_code == 1
    assert "Invalid config" in result.output

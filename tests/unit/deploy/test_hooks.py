"""Unit tests for HookRunner."""

from unittest.mock import Mock, call

import pytest

from stretcher.core.protocols import Logger, ProcessResult, ProcessRunner
from stretcher.deploy.base import DeployStage
from stretcher.deploy.exceptions import HookError
from stretcher.deploy.hooks import HookRunner


def result(cmd, returncode=0, output=""):
    return ProcessResult(args=["sh", "-c", cmd], returncode=returncode, output=output)


class TestHookRunner:

    def setup_method(self):
        self.process = Mock(spec=ProcessRunner)
        self.logger = Mock(spec=Logger)
        self.runner = HookRunner(self.process, self.logger)

    def test_runs_commands_in_order_through_shell(self):
        self.process.run.side_effect = lambda cmd: result(cmd[2])

        self.runner.run(["echo one", "echo two", "echo three"])

        assert self.process.run.call_args_list == [
            call(["sh", "-c", "echo one"]),
            call(["sh", "-c", "echo two"]),
            call(["sh", "-c", "echo three"]),
        ]

    def test_empty_list_runs_nothing(self):
        self.runner.run([])

        self.process.run.assert_not_called()

    def test_stops_at_first_failure(self):
        self.process.run.side_effect = [
            result("ok"),
            result("boom", returncode=2, output="boom: not found\n"),
            result("never"),
        ]

        with pytest.raises(HookError) as excinfo:
            self.runner.run(["ok", "boom", "never"], DeployStage.POST_HOOKS)

        assert self.process.run.call_count == 2
        error = excinfo.value
        assert error.command == "boom"
        assert error.returncode == 2
        assert error.output == "boom: not found\n"
        assert error.stage is DeployStage.POST_HOOKS
        assert "post-hooks" in str(error)
        assert "boom: not found" in str(error)

    def test_launch_failure_is_hook_error(self):
        self.process.run.side_effect = FileNotFoundError(2, "No such file or directory: 'sh'")

        with pytest.raises(HookError) as excinfo:
            self.runner.run(["anything"])

        assert excinfo.value.returncode is None
        assert "could not launch" in str(excinfo.value)
        assert excinfo.value.stage is DeployStage.PRE_HOOKS

    def test_output_is_logged(self):
        self.process.run.side_effect = lambda cmd: result(cmd[2], output="hello\n")

        self.runner.run(["echo hello"])

        logged = [c.args[0] for c in self.logger.info.call_args_list]
        assert "invoking pre-hooks command: echo hello" in logged
        assert "hello" in logged

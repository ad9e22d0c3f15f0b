"""
HookRunner - run user-declared shell commands before and after the transfer.
"""

from typing import Sequence

from stretcher.core.protocols import Logger, ProcessRunner
from .base import DeployStage
from .exceptions import HookError

SHELL = "sh"


class HookRunner:
    """
    Runs hook commands through `sh -c`, one at a time, in declared order.

    Stops at the first command that exits non-zero or fails to start; the
    remaining commands are never run. No retries.
    """

    def __init__(self, process_runner: ProcessRunner, logger: Logger):
        self.process = process_runner
        self.log = logger

    def run(self, commands: Sequence[str], stage: DeployStage = DeployStage.PRE_HOOKS) -> None:
        """
        Run commands for one hook phase.

        Args:
            commands: Shell command strings
            stage: PRE_HOOKS or POST_HOOKS, used for logging and errors

        Raises:
            HookError: First failing command, with its combined output
        """
        for command in commands:
            self.log.info(f"invoking {stage.value} command: {command}")
            try:
                result = self.process.run([SHELL, "-c", command])
            except OSError as e:
                raise HookError(command, None, str(e), stage) from e
            if result.output:
                self.log.info(result.output.rstrip("\n"))
            if not result.ok:
                raise HookError(command, result.returncode, result.output, stage)

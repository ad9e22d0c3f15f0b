"""
Deployment exceptions.

Every failure carries the pipeline stage it happened in, so the CLI can report
which step broke and why without parsing messages.
"""

from typing import Optional

from .base import DeployStage


def describe_command_failure(command: str, returncode: Optional[int], output: str) -> str:
    """Render a failed command for an error message (returncode None = never started)."""
    if returncode is None:
        return f"could not launch '{command}': {output}"
    message = f"'{command}' exited with status {returncode}"
    if output:
        message += f"\n{output}"
    return message


class DeploymentError(Exception):
    """
    Raised when deployment fails at any step.

    Attributes:
        stage: Pipeline stage that failed (DeployStage)
        reason: Underlying cause, without the stage prefix
    """
    default_stage = DeployStage.FAILED

    def __init__(self, reason: str, stage: Optional[DeployStage] = None):
        self.reason = reason
        self.stage = stage or self.default_stage
        super().__init__(f"{self.stage.value} failed: {reason}")


class ConfigError(DeploymentError):
    """Manifest is malformed or missing a required field (src, dest)."""
    default_stage = DeployStage.LOADING


class UnsupportedChecksumError(DeploymentError):
    """Checksum length matches no known digest (32/40/64/128 hex chars)."""
    default_stage = DeployStage.FETCHING

    def __init__(self, checksum: str, stage: Optional[DeployStage] = None):
        self.checksum = checksum
        super().__init__(
            f"checksum must be md5, sha1, sha256, sha512 hex string "
            f"(got {len(checksum)} characters)",
            stage
        )


class TransferError(DeploymentError):
    """Source could not be retrieved or copied (I/O error, short write)."""
    default_stage = DeployStage.FETCHING


class ChecksumMismatchError(DeploymentError):
    """Computed digest differs from the declared checksum."""
    default_stage = DeployStage.VERIFYING

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Checksum mismatch. expected:{expected} got:{actual}")


class CommandError(DeploymentError):
    """
    An external command failed.

    Attributes:
        command: Command line as a string
        returncode: Exit status, or None if the command never started
        output: Combined stdout/stderr (or the launch error), verbatim
    """

    def __init__(
        self,
        command: str,
        returncode: Optional[int],
        output: str,
        stage: Optional[DeployStage] = None
    ):
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(describe_command_failure(command, returncode, output), stage)


class HookError(CommandError):
    """A pre/post deploy command exited non-zero or could not be launched."""
    default_stage = DeployStage.PRE_HOOKS


class ExtractionError(CommandError):
    """tar could not unpack the staged archive."""
    default_stage = DeployStage.EXTRACTING


class SyncError(CommandError):
    """rsync could not mirror the extracted tree onto the destination."""
    default_stage = DeployStage.SYNCING

"""Protocol definitions for dependency injection.

This module defines Protocol-based abstractions for every external dependency
the deployment pipeline touches: logging, process execution, manifest loading
and source retrieval. Protocols use structural typing, so any class implementing
these methods satisfies the Protocol without explicit inheritance.

Benefits:
- Easy to mock in tests (Mock(spec=ProcessRunner) etc.)
- No inheritance required
- Type-safe with mypy/pyright
- Clear interface contracts
"""

from dataclasses import dataclass
from typing import Protocol, Dict, Any, Optional, List, BinaryIO, ContextManager


@dataclass
class ProcessResult:
    """Outcome of a finished external command.

    Attributes:
        args: Command as executed
        returncode: Exit status (0 = success)
        output: Combined stdout/stderr, decoded as text
    """
    args: List[str]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Logger(Protocol):
    """Abstraction for logging operations.

    Every pipeline component receives one of these instead of printing,
    so tests can assert on what was reported.
    """

    def info(self, message: str) -> None:
        """Log informational message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...


class ProcessRunner(Protocol):
    """Abstraction for running external commands to completion.

    Wraps subprocess.run so hooks, tar and rsync can be tested without
    spawning real processes. Blocks until the command exits; there is no
    timeout.
    """

    def run(
        self,
        cmd: List[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None
    ) -> ProcessResult:
        """Run command, capture combined output, return the result.

        Raises:
            OSError: If the command could not be started
        """
        ...


class SourceOpener(Protocol):
    """Abstraction for turning a locator string into a readable byte stream.

    Interpretation of the locator (URL scheme vs. local path) belongs
    entirely to the implementation.
    """

    def open(self, locator: str) -> ContextManager[BinaryIO]:
        """Open locator for binary reading.

        Raises:
            TransferError: If the source cannot be retrieved
        """
        ...


class ConfigLoader(Protocol):
    """Abstraction for configuration parsing.

    Wraps YAML decoding to enable testing with canned documents.
    """

    def load_yaml(self, data: Any) -> Any:
        """Parse YAML text or bytes and return the decoded document."""
        ...

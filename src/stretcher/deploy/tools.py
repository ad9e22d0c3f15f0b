"""
External tool collaborators: tar for extraction, rsync for mirroring.

Both are thin wrappers over a ProcessRunner that return the ProcessResult
unchanged; the orchestrator decides what a non-zero exit means.
"""

import os
from typing import Protocol, runtime_checkable

from stretcher.core.protocols import ProcessResult, ProcessRunner


def with_trailing_separator(path: str) -> str:
    """Append os.sep unless path already ends with a separator.

    rsync treats "dir/" as "the contents of dir", which is what mirroring
    needs on both sides.
    """
    if path.endswith(("/", os.sep)):
        return path
    return path + os.sep


@runtime_checkable
class ArchiveExtractor(Protocol):
    """Unpacks a staged archive into a target directory."""

    def command(self, archive: str) -> list[str]:
        ...

    def extract(self, archive: str, target_dir: str) -> ProcessResult:
        ...


@runtime_checkable
class DirectorySynchronizer(Protocol):
    """Mirrors a source directory onto a destination (extraneous files deleted)."""

    def command(self, source_dir: str, destination: str) -> list[str]:
        ...

    def sync(self, source_dir: str, destination: str) -> ProcessResult:
        ...


class TarExtractor:
    """Extracts with `tar xf`, run with the target directory as its cwd.

    The process-wide working directory is never touched, so concurrent
    runs in one process do not interfere.
    """

    def __init__(self, process_runner: ProcessRunner, tar: str = "tar"):
        self.process = process_runner
        self.tar = tar

    def command(self, archive: str) -> list[str]:
        return [self.tar, "xf", archive]

    def extract(self, archive: str, target_dir: str) -> ProcessResult:
        return self.process.run(self.command(archive), cwd=target_dir)


class RsyncSynchronizer:
    """Mirrors with `rsync -av --delete src/ dest/`."""

    def __init__(self, process_runner: ProcessRunner, rsync: str = "rsync"):
        self.process = process_runner
        self.rsync = rsync

    def command(self, source_dir: str, destination: str) -> list[str]:
        return [
            self.rsync,
            "-av",
            "--delete",
            with_trailing_separator(source_dir),
            with_trailing_separator(destination),
        ]

    def sync(self, source_dir: str, destination: str) -> ProcessResult:
        return self.process.run(self.command(source_dir, destination))

"""Shared fixtures for stretcher tests."""

import hashlib
import io
from contextlib import nullcontext
from unittest.mock import Mock

import pytest

from stretcher.core.protocols import Logger, ProcessResult, SourceOpener
from stretcher.deploy.tools import ArchiveExtractor, DirectorySynchronizer

ARCHIVE_BYTES = b"pretend this is a tarball\n" * 4096


def ok_result(*args, output=""):
    return ProcessResult(args=list(args), returncode=0, output=output)


@pytest.fixture
def archive_bytes():
    return ARCHIVE_BYTES


@pytest.fixture
def archive_md5(archive_bytes):
    return hashlib.md5(archive_bytes).hexdigest()


@pytest.fixture
def logger():
    return Mock(spec=Logger)


@pytest.fixture
def opener(archive_bytes):
    """SourceOpener that serves archive_bytes for any locator."""
    opener = Mock(spec=SourceOpener)
    opener.open.side_effect = lambda locator: nullcontext(io.BytesIO(archive_bytes))
    return opener


@pytest.fixture
def extractor():
    extractor = Mock(spec=ArchiveExtractor)
    extractor.command.side_effect = lambda archive: ["tar", "xf", archive]
    extractor.extract.side_effect = lambda archive, target: ok_result("tar", "xf", archive)
    return extractor


@pytest.fixture
def synchronizer():
    synchronizer = Mock(spec=DirectorySynchronizer)
    synchronizer.command.side_effect = lambda src, dest: ["rsync", "-av", "--delete", src, dest]
    synchronizer.sync.side_effect = lambda src, dest: ok_result("rsync", "-av", "--delete", src, dest)
    return synchronizer

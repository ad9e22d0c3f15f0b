"""
ManifestDeployer - fetch, verify, extract and mirror an archive onto a host.

Strategy: download+hash → pre hooks → tar xf → rsync --delete → post hooks

Staging files live only for the duration of deploy(): the archive temp file
and the extraction temp directory are removed on every exit path, success or
failure, before deploy() returns or raises.
"""

import os
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional

from stretcher.core.protocols import Logger, ProcessResult, SourceOpener
from .base import DeployStage, DeploymentResult
from .checksum import UNVERIFIED_ALGORITHM, copy_and_hash, select_hash, verify_checksum
from .exceptions import DeploymentError, ExtractionError, SyncError, TransferError
from .hooks import HookRunner
from .manifest import Manifest
from .tools import ArchiveExtractor, DirectorySynchronizer, with_trailing_separator

ARCHIVE_PREFIX = "stretcher"
EXTRACT_PREFIX = "stretcher_src"


@contextmanager
def staging_file(directory: Optional[str] = None) -> Iterator[str]:
    """Yield the path of a fresh, closed, uniquely named temp file; remove it on exit.

    Raises:
        TransferError: The temp file could not be created
    """
    try:
        handle = tempfile.NamedTemporaryFile(prefix=ARCHIVE_PREFIX, dir=directory, delete=False)
    except OSError as e:
        raise TransferError(f"cannot create staging file in {directory or tempfile.gettempdir()}: {e}") from e
    handle.close()
    try:
        yield handle.name
    finally:
        try:
            os.remove(handle.name)
        except FileNotFoundError:
            pass


class ManifestDeployer:
    """
    Deploys one Manifest.

    Target: the local host (destination is a local path, or anything rsync
    accepts as a destination).
    Requirements: tar, rsync, sh on PATH.

    All collaborators are injected; see stretcher.commands.deploy for the
    production wiring.
    """

    def __init__(
        self,
        manifest: Manifest,
        opener: SourceOpener,
        extractor: ArchiveExtractor,
        synchronizer: DirectorySynchronizer,
        hook_runner: HookRunner,
        logger: Logger,
        temp_dir: Optional[str] = None
    ):
        """
        Initialize deployer.

        Args:
            manifest: Validated manifest for this run
            opener: Resolves manifest.source to a byte stream
            extractor: Unpacks the staged archive (tar)
            synchronizer: Mirrors the extracted tree to manifest.destination (rsync)
            hook_runner: Runs pre/post commands
            logger: Progress and diagnostics
            temp_dir: Parent for staging file/dir (default: tempfile.gettempdir())
        """
        self.manifest = manifest
        self.opener = opener
        self.extractor = extractor
        self.synchronizer = synchronizer
        self.hooks = hook_runner
        self.log = logger
        self.temp_dir = temp_dir
        self.stage = DeployStage.LOADING

    def _enter(self, stage: DeployStage) -> None:
        self.stage = stage
        self.log.debug(f"stage: {stage.value}")

    def deploy(self) -> DeploymentResult:
        """
        Run the whole pipeline.

        Steps:
            1. Fetch source into a temp file, hashing in the same pass
            2. Verify checksum (skipped when manifest declares none)
            3. Run pre commands
            4. Extract archive into a temp directory
            5. rsync -av --delete extracted/ dest/
            6. Run post commands

        Returns:
            DeploymentResult with stage=DONE

        Raises:
            DeploymentError: Subclass naming the failing stage; staging
                artifacts are already removed when it propagates
        """
        try:
            return self._deploy()
        except DeploymentError as e:
            self.log.error(str(e))
            self.stage = DeployStage.FAILED
            raise

    def _deploy(self) -> DeploymentResult:
        manifest = self.manifest
        metadata: dict[str, str] = {}

        # Step 1: Fetch
        self._enter(DeployStage.FETCHING)
        with staging_file(self.temp_dir) as archive:
            written, digest = self._fetch(archive)
            self.log.info(f"Wrote {written} bytes to {archive}")

            # Step 2: Verify (before any hook can run)
            self._enter(DeployStage.VERIFYING)
            if verify_checksum(manifest.checksum, digest):
                self.log.info(f"Checksum ok: {digest}")
            else:
                self.log.warning(f"No checksum declared, not verified. {UNVERIFIED_ALGORITHM}: {digest}")

            # Step 3: Pre hooks
            self._enter(DeployStage.PRE_HOOKS)
            self.hooks.run(manifest.pre_commands, DeployStage.PRE_HOOKS)

            # Step 4: Extract
            self._enter(DeployStage.EXTRACTING)
            with self._extraction_dir() as extract_dir:
                self.log.info(f"Extract archive: {archive} to {extract_dir}")
                result = self._invoke(
                    ExtractionError,
                    lambda: self.extractor.extract(archive, extract_dir),
                    lambda: self.extractor.command(archive)
                )
                metadata["tar"] = result.output

                # Step 5: Sync
                self._enter(DeployStage.SYNCING)
                source_dir = with_trailing_separator(extract_dir)
                destination = with_trailing_separator(manifest.destination)
                self.log.info(f"rsync -av --delete {source_dir} {destination}")
                result = self._invoke(
                    SyncError,
                    lambda: self.synchronizer.sync(source_dir, destination),
                    lambda: self.synchronizer.command(source_dir, destination)
                )
                metadata["rsync"] = result.output

            # Step 6: Post hooks
            self._enter(DeployStage.POST_HOOKS)
            self.hooks.run(manifest.post_commands, DeployStage.POST_HOOKS)

        self._enter(DeployStage.DONE)
        return DeploymentResult(
            success=True,
            stage=DeployStage.DONE,
            bytes_written=written,
            digest=digest,
            destination=destination,
            staged_archive=archive,
            extracted_dir=extract_dir,
            metadata=metadata
        )

    def _fetch(self, archive: str):
        """Stream manifest.source into archive; return (bytes_written, digest)."""
        # Selecting the hash first rejects bad checksum lengths before any download
        hasher = select_hash(self.manifest.checksum)
        with self.opener.open(self.manifest.source) as src:
            try:
                dst = open(archive, "wb")
            except OSError as e:
                raise TransferError(f"cannot write staging file {archive}: {e}") from e
            with dst:
                return copy_and_hash(dst, src, hasher)

    def _extraction_dir(self) -> tempfile.TemporaryDirectory:
        try:
            return tempfile.TemporaryDirectory(prefix=EXTRACT_PREFIX, dir=self.temp_dir)
        except OSError as e:
            parent = self.temp_dir or tempfile.gettempdir()
            raise ExtractionError(f"mkdtemp {parent}/{EXTRACT_PREFIX}*", None, str(e)) from e

    def _invoke(self, error_type, action, command) -> ProcessResult:
        """Run an external tool collaborator, raising error_type on failure.

        command() gives the tool's command line; it is only consulted when
        the tool could not be launched at all.
        """
        try:
            result = action()
        except OSError as e:
            raise error_type(" ".join(command()), None, str(e)) from e
        if result.output:
            self.log.info(result.output.rstrip("\n"))
        if not result.ok:
            raise error_type(" ".join(result.args), result.returncode, result.output)
        return result

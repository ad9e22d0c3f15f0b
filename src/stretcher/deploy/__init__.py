"""
Archive deployment subsystem.

Pipeline: fetch+hash → verify → pre hooks → tar xf → rsync --delete → post hooks

Public API:
    - Manifest, parse_manifest, load_manifest: Validated configuration
    - ManifestDeployer: Pipeline orchestrator
    - HookRunner: Pre/post shell commands
    - TarExtractor, RsyncSynchronizer: External tool collaborators
    - copy_and_hash, select_hash, verify_checksum: Streaming digest
    - DeploymentResult, DeployStage: Result types
    - DeploymentError and subclasses: Exceptions
"""

from .base import DeployStage, DeploymentResult
from .exceptions import (
    DeploymentError,
    ConfigError,
    UnsupportedChecksumError,
    TransferError,
    ChecksumMismatchError,
    CommandError,
    HookError,
    ExtractionError,
    SyncError,
)
from .checksum import copy_and_hash, select_hash, verify_checksum
from .manifest import Manifest, parse_manifest, load_manifest
from .hooks import HookRunner
from .tools import (
    ArchiveExtractor,
    DirectorySynchronizer,
    TarExtractor,
    RsyncSynchronizer,
)
from .deployer import ManifestDeployer

__all__ = [
    # Types
    "DeployStage",
    "DeploymentResult",
    "Manifest",

    # Exceptions
    "DeploymentError",
    "ConfigError",
    "UnsupportedChecksumError",
    "TransferError",
    "ChecksumMismatchError",
    "CommandError",
    "HookError",
    "ExtractionError",
    "SyncError",

    # Operations
    "parse_manifest",
    "load_manifest",
    "copy_and_hash",
    "select_hash",
    "verify_checksum",

    # Collaborators
    "HookRunner",
    "ArchiveExtractor",
    "DirectorySynchronizer",
    "TarExtractor",
    "RsyncSynchronizer",

    # Orchestrator
    "ManifestDeployer",
]

"""
Deployment result and stage types.

The pipeline is a straight line of stages; DeployStage names them so both
results and errors can say where a run ended.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DeployStage(Enum):
    """Pipeline stages, in execution order (FAILED is terminal, any step)."""
    LOADING = "loading"
    FETCHING = "fetching"
    VERIFYING = "verifying"
    PRE_HOOKS = "pre-hooks"
    EXTRACTING = "extracting"
    SYNCING = "syncing"
    POST_HOOKS = "post-hooks"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DeploymentResult:
    """
    Result of a successful deployment.

    Attributes:
        success: Whether deployment succeeded
        stage: Last stage reached (DONE on success)
        bytes_written: Size of the staged archive
        digest: Lower-case hex digest of the archive
        destination: Destination path as synced (trailing separator)
        staged_archive: Temp file path used during the run (already removed)
        extracted_dir: Temp directory used during the run (already removed)
        metadata: Captured tar/rsync output, keyed by tool name
    """
    success: bool
    stage: DeployStage
    bytes_written: int
    digest: str
    destination: str
    staged_archive: Optional[str] = None
    extracted_dir: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)

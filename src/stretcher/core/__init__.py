"""Dependency injection infrastructure for stretcher.

Protocol-based abstractions for every external dependency (logging,
subprocess, source retrieval, YAML) with production implementations.
Unit tests substitute Mock(spec=<Protocol>) for any of them.
"""

from stretcher.core.protocols import (
    Logger,
    ProcessRunner,
    ProcessResult,
    SourceOpener,
    ConfigLoader,
)

from stretcher.core.implementations import (
    ConsoleLogger,
    SubprocessRunner,
    UrlSourceOpener,
    YamlConfigLoader,
    configure_logging,
)

__all__ = [
    # Protocols
    "Logger",
    "ProcessRunner",
    "ProcessResult",
    "SourceOpener",
    "ConfigLoader",
    # Implementations
    "ConsoleLogger",
    "SubprocessRunner",
    "UrlSourceOpener",
    "YamlConfigLoader",
    "configure_logging",
]

"""
Manifest - validated deployment configuration.

Manifest YAML format:

    src: https://example.com/app-1.2.3.tar.gz   # required
    checksum: 0123abcd...                        # optional md5/sha1/sha256/sha512 hex
    dest: /srv/app/                              # required
    commands:
      pre:
        - systemctl stop app
      post:
        - systemctl start app
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

import yaml

from stretcher.core.protocols import ConfigLoader, SourceOpener
from .base import DeployStage
from .checksum import algorithm_for
from .exceptions import ConfigError, TransferError


@dataclass(frozen=True)
class Manifest:
    """
    Immutable deployment manifest.

    The checksum is kept verbatim; its length is only checked when hashing
    starts (or at parse time with strict=True).
    """
    source: str
    destination: str
    checksum: str = ""
    pre_commands: Tuple[str, ...] = ()
    post_commands: Tuple[str, ...] = ()


def _command_list(commands: Any, phase: str) -> Tuple[str, ...]:
    if commands is None:
        return ()
    if not isinstance(commands, list) or not all(isinstance(c, str) for c in commands):
        raise ConfigError(f"commands.{phase} must be a list of strings")
    return tuple(commands)


def _string_field(document: dict, key: str) -> str:
    value = document.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def parse_manifest(
    data: Union[bytes, str],
    strict: bool = False,
    config_loader: Optional[ConfigLoader] = None
) -> Manifest:
    """
    Parse manifest YAML into a Manifest.

    Args:
        data: Raw YAML document
        strict: Also reject checksums of unsupported length now instead of
            when hashing starts
        config_loader: YAML decoder (defaults to yaml.safe_load)

    Raises:
        ConfigError: Malformed YAML, wrong shape, empty src or dest
        UnsupportedChecksumError: strict=True and checksum length unknown
    """
    try:
        if config_loader is not None:
            document = config_loader.load_yaml(data)
        else:
            document = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed manifest: {e}") from e

    if not isinstance(document, dict):
        raise ConfigError("manifest must be a mapping")

    source = _string_field(document, "src")
    if not source:
        raise ConfigError("src is required")
    destination = _string_field(document, "dest")
    if not destination:
        raise ConfigError("dest is required")

    # Unquoted hex digests that happen to be all digits load as int
    raw_checksum = document.get("checksum")
    checksum = "" if raw_checksum is None else str(raw_checksum)

    commands = document.get("commands") or {}
    if not isinstance(commands, dict):
        raise ConfigError("commands must be a mapping with 'pre' and/or 'post' lists")

    manifest = Manifest(
        source=source,
        destination=destination,
        checksum=checksum,
        pre_commands=_command_list(commands.get("pre"), "pre"),
        post_commands=_command_list(commands.get("post"), "post"),
    )
    if strict:
        algorithm_for(manifest.checksum, stage=DeployStage.LOADING)
    return manifest


def load_manifest(
    locator: str,
    opener: SourceOpener,
    strict: bool = False,
    config_loader: Optional[ConfigLoader] = None
) -> Manifest:
    """Fetch a manifest through the source opener (path or URL) and parse it.

    Raises:
        TransferError: Manifest could not be read (stage LOADING)
        ConfigError: Manifest is malformed
    """
    try:
        with opener.open(locator) as stream:
            data = stream.read()
    except TransferError as e:
        raise TransferError(e.reason, DeployStage.LOADING) from e
    return parse_manifest(data, strict=strict, config_loader=config_loader)

"""Production implementations of dependency injection protocols.

This module provides real implementations that wrap actual external dependencies
(logging, subprocess, HTTP, YAML). These are used in production code.

For testing, use mocks or test doubles instead of these implementations.
"""

import logging
import subprocess
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Any, Optional, List, BinaryIO, Iterator
from urllib.parse import urlparse, unquote

import requests
import urllib3
import yaml

from stretcher.core.protocols import ProcessResult
from stretcher.deploy.exceptions import TransferError

LOGGER_NAME = "stretcher"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Attach a stderr handler to the stretcher logger (idempotent)."""
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)


class ConsoleLogger:
    """Production logger backed by the stdlib logging module."""

    def __init__(self, name: str = LOGGER_NAME):
        self._log = logging.getLogger(name)

    def info(self, message: str) -> None:
        self._log.info(message)

    def warning(self, message: str) -> None:
        self._log.warning(message)

    def error(self, message: str) -> None:
        self._log.error(message)

    def debug(self, message: str) -> None:
        self._log.debug(message)


class SubprocessRunner:
    """Production process runner using real subprocess.run."""

    def run(
        self,
        cmd: List[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None
    ) -> ProcessResult:
        """Run command with stderr folded into stdout."""
        completed = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=cwd,
            env=env,
            check=False
        )
        output = completed.stdout.decode("utf-8", errors="replace") if completed.stdout else ""
        return ProcessResult(args=list(cmd), returncode=completed.returncode, output=output)


class ResponseStream:
    """File-like read() over a streamed requests response.

    Transport errors raised mid-body surface as TransferError instead of
    urllib3 exception types.
    """

    def __init__(self, response: requests.Response, url: str):
        self._raw = response.raw
        self._url = url

    def read(self, size: int = -1) -> bytes:
        try:
            return self._raw.read(None if size < 0 else size, decode_content=True)
        except (urllib3.exceptions.HTTPError, requests.RequestException) as e:
            raise TransferError(f"Read src failed: {self._url}: {e}") from e


class UrlSourceOpener:
    """Production source opener.

    Supported locators:
        http://host/path, https://host/path  -> streamed GET via requests
        file:///abs/path                     -> local file
        /abs/path, relative/path             -> local file
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 30.0):
        self._session = session or requests.Session()
        self._timeout = timeout

    @contextmanager
    def open(self, locator: str) -> Iterator[BinaryIO]:
        scheme = urlparse(locator).scheme.lower()
        if scheme in ("http", "https"):
            with self._open_http(locator) as stream:
                yield stream
        elif scheme == "file":
            with self._open_file(unquote(urlparse(locator).path)) as stream:
                yield stream
        elif scheme == "" or len(scheme) == 1:
            # len(scheme) == 1 is a Windows drive letter, not a URL
            with self._open_file(locator) as stream:
                yield stream
        else:
            raise TransferError(f"Unsupported source scheme '{scheme}' in {locator}")

    @contextmanager
    def _open_http(self, url: str) -> Iterator[BinaryIO]:
        try:
            response = self._session.get(url, stream=True, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransferError(f"Get src failed: {url}: {e}") from e
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            response.close()
            raise TransferError(f"Get src failed: {url}: {e}") from e
        try:
            yield ResponseStream(response, url)
        finally:
            response.close()

    @contextmanager
    def _open_file(self, path: str) -> Iterator[BinaryIO]:
        try:
            handle = Path(path).open("rb")
        except OSError as e:
            raise TransferError(f"Get src failed: {path}: {e}") from e
        with handle:
            yield handle


class YamlConfigLoader:
    """Production config loader using real YAML parser."""

    def load_yaml(self, data: Any) -> Any:
        """Parse YAML text or bytes (raises yaml.YAMLError on bad input)."""
        return yaml.safe_load(data)

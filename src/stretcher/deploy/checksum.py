"""
Streaming digest support.

The archive is hashed while it is being copied to the staging file, so the
payload is read exactly once and never held in memory as a whole.

Algorithm selection is by checksum length:
    32 hex chars  -> md5
    40 hex chars  -> sha1
    64 hex chars  -> sha256
    128 hex chars -> sha512
"""

import hashlib
from typing import BinaryIO, Tuple

from .base import DeployStage
from .exceptions import ChecksumMismatchError, TransferError, UnsupportedChecksumError

COPY_CHUNK_SIZE = 32 * 1024

ALGORITHMS_BY_LENGTH = {
    32: "md5",
    40: "sha1",
    64: "sha256",
    128: "sha512",
}

# Used only to report a digest when the manifest declares no checksum
UNVERIFIED_ALGORITHM = "sha256"


def algorithm_for(checksum: str, stage: DeployStage = DeployStage.FETCHING) -> str:
    """Return the hashlib algorithm name implied by the checksum length.

    Raises:
        UnsupportedChecksumError: Non-empty checksum of unknown length
    """
    if not checksum:
        return UNVERIFIED_ALGORITHM
    try:
        return ALGORITHMS_BY_LENGTH[len(checksum)]
    except KeyError:
        raise UnsupportedChecksumError(checksum, stage) from None


def select_hash(checksum: str):
    """Create a fresh hash object for the given declared checksum."""
    return hashlib.new(algorithm_for(checksum))


def copy_and_hash(dst: BinaryIO, src: BinaryIO, hasher, chunk_size: int = COPY_CHUNK_SIZE) -> Tuple[int, str]:
    """
    Copy src to dst in bounded chunks while feeding hasher the same bytes.

    Args:
        dst: Writable binary stream
        src: Readable binary stream
        hasher: hashlib-style object (update/hexdigest)
        chunk_size: Max bytes per read

    Returns:
        (bytes_written, lower-case hex digest)

    Raises:
        TransferError: On any read/write error or short write. The digest of
            the bytes processed so far is discarded.
    """
    written = 0
    try:
        while True:
            chunk = src.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
            count = dst.write(chunk)
            # Raw (unbuffered) writers may return None or a short count
            if count is None or count != len(chunk):
                raise TransferError(
                    f"short write: wrote {written + (count or 0)} of "
                    f"{written + len(chunk)} bytes read"
                )
            written += count
    except OSError as e:
        raise TransferError(f"copy failed after {written} bytes: {e}") from e
    return written, hasher.hexdigest().lower()


def verify_checksum(expected: str, actual: str) -> bool:
    """
    Compare declared and computed digests case-insensitively.

    Returns:
        True if verified, False if no checksum was declared (not enforced)

    Raises:
        ChecksumMismatchError: Digests differ
    """
    if not expected:
        return False
    if expected.lower() != actual.lower():
        raise ChecksumMismatchError(expected, actual)
    return True

"""Content-addressed image storage."""

import hashlib
import logging
import re
from pathlib import Path

from .errors import InvalidArgumentError, NotFoundError, StorageReadError, StorageWriteError
from .fsutil import write_bytes_atomic

logger = logging.getLogger(__name__)

_EXT_PATTERN = re.compile(r"(\.[^/\\\x00]*)?")
_KEY_PATTERN = re.compile(r"[0-9a-f]{64}(\.[^/\\\x00]*)?")


def image_key(content: bytes, ext: str = "") -> str:
    """Return the storage key for ``content``: its SHA-256 hex digest plus ``ext``."""
    return hashlib.sha256(content).hexdigest() + ext


class FileImageStore:
    """Stores image blobs as ``<sha256><ext>`` files under a root directory.

    Identical content always resolves to the same file, so storing the same
    bytes twice rewrites an identical file and returns the same key.
    """

    def __init__(self, root: str | Path):
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path | None:
        """Resolve the file for ``key``, or None if ``key`` is not a valid image key."""
        if not _KEY_PATTERN.fullmatch(key):
            return None
        return self._root / key

    def put(self, content: bytes, ext: str = "") -> str:
        """Store ``content`` and return its key.

        Args:
            content: raw image bytes
            ext: original file extension including the leading dot, or ""

        Raises:
            InvalidArgumentError: if ``ext`` does not start with a dot or contains a path separator
            StorageWriteError: if the file cannot be written
        """
        if not _EXT_PATTERN.fullmatch(ext):
            raise InvalidArgumentError(f"invalid image extension: {ext!r}")

        key = image_key(content, ext)
        path = self._root / key
        try:
            write_bytes_atomic(path, content)
        except OSError as e:
            logger.error(f"Failed to store image {key}: {e}")
            raise StorageWriteError(f"failed to store image {key}: {e}") from e

        logger.info(f"Stored image {key} ({len(content)} bytes)")
        return key

    def get(self, key: str) -> bytes:
        """Return the bytes stored under ``key``."""
        path = self._path(key)
        if path is None:
            raise NotFoundError("image", key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError("image", key) from None
        except OSError as e:
            raise StorageReadError(f"failed to read image {key}: {e}") from e

    def exists(self, key: str) -> bool:
        path = self._path(key)
        return path is not None and path.is_file()

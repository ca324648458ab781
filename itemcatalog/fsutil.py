"""Filesystem helpers shared by the file-backed stores."""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` so readers see either the old or the new content.

    The payload goes to a temporary file in the destination directory, is
    fsynced, and is then renamed over ``path``. The temporary file is removed
    if anything fails before the rename.

    Raises:
        OSError: if the write or the rename fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "wb", dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp", delete=False
    ) as handle:
        temp_path = Path(handle.name)
        try:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        except BaseException:
            handle.close()
            temp_path.unlink(missing_ok=True)
            raise

    try:
        os.replace(temp_path, path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise

    logger.debug(f"Wrote {len(data)} bytes to {path}")

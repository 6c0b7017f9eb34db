"""File operation utilities for tsgraph."""

import contextlib
import os
import platform
import stat
import tempfile
from pathlib import Path


def datasync(fd: int) -> None:
    """Sync file data to disk.

    Uses fdatasync on Linux, fsync on macOS/other platforms.

    Args:
        fd: File descriptor to sync
    """
    if hasattr(os, "fdatasync") and platform.system() != "Darwin":
        os.fdatasync(fd)
    else:
        os.fsync(fd)


def atomic_write_bytes(path: str | Path, data: bytes) -> None:
    """Atomically replace a file's content.

    Writes to a secure temporary file in the target directory first, then
    renames it over the target so readers never see a partial file.

    Args:
        path: Target file path
        data: Bytes to write
    """
    target_path = Path(path)
    target_dir = target_path.parent

    # Ensure target directory exists
    target_dir.mkdir(parents=True, exist_ok=True)

    tmp_fd = None
    tmp_path = None
    try:
        tmp_fd, tmp_name = tempfile.mkstemp(
            suffix=".cache",
            prefix=".tmp_",
            dir=str(target_dir),
        )
        tmp_path = Path(tmp_name)

        with os.fdopen(tmp_fd, "wb") as f:
            tmp_fd = None  # fd is now owned by the file object
            f.write(data)
            f.flush()
            datasync(f.fileno())

        # Readable by owner only
        os.chmod(tmp_path, stat.S_IRUSR | stat.S_IWUSR)

        os.replace(tmp_path, target_path)
        tmp_path = None  # Successfully renamed, don't clean up

    finally:
        # Clean up temp file if rename failed
        if tmp_fd is not None:
            os.close(tmp_fd)
        if tmp_path is not None and tmp_path.exists():
            with contextlib.suppress(OSError):
                tmp_path.unlink()

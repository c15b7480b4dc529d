"""Durable file copy with explicit permission control."""

from __future__ import annotations

import logging
import os
import stat

from .errors import (
    CopyError,
    DestinationOpenError,
    FlushError,
    MetadataError,
    PermissionSetError,
    SourceOpenError,
)

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 64 * 1024

_O_BINARY = getattr(os, "O_BINARY", 0)


def copy_stream(src_fd: int, dst_fd: int, buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
    """Copy everything readable from src_fd to dst_fd, one bounded chunk at a time."""
    total = 0
    while True:
        chunk = os.read(src_fd, buffer_size)
        if not chunk:
            return total
        view = memoryview(chunk)
        while view:
            written = os.write(dst_fd, view)
            view = view[written:]
        total += len(chunk)


def _release(fd: int, path: str | os.PathLike[str]) -> None:
    """Close fd on an error path without replacing the error already raised."""
    try:
        os.close(fd)
    except OSError:
        logger.warning("Failed to close %s after an earlier error", path, exc_info=True)


def copy_file(
    source_path: str | os.PathLike[str],
    destination_path: str | os.PathLike[str],
    *,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Copy the bytes and permission mode of source_path to destination_path.

    The destination is created if missing and truncated otherwise, then
    fsynced before returning. Each failing step raises its own CopyFileError
    subclass with the OSError chained. A failure while streaming leaves the
    partially written destination in place. A failure to close the
    destination after the fsync is also reported as FlushError.

    Returns the number of bytes copied.
    """
    if buffer_size <= 0:
        raise ValueError(f"buffer_size must be positive, got {buffer_size}")

    try:
        src_fd = os.open(source_path, os.O_RDONLY | _O_BINARY)
    except OSError as exc:
        raise SourceOpenError(source_path, exc) from exc
    try:
        try:
            st = os.fstat(src_fd)
        except OSError as exc:
            raise MetadataError(source_path, exc) from exc
        mode = stat.S_IMODE(st.st_mode)
        logger.debug("Opened %s (%d bytes, mode %o)", source_path, st.st_size, mode)

        try:
            dst_fd = os.open(
                destination_path,
                os.O_WRONLY | os.O_CREAT | os.O_TRUNC | _O_BINARY,
                mode,
            )
        except OSError as exc:
            raise DestinationOpenError(destination_path, exc) from exc
        try:
            try:
                copied = copy_stream(src_fd, dst_fd, buffer_size)
            except OSError as exc:
                raise CopyError(destination_path, exc) from exc
            logger.debug("Wrote %d bytes to %s", copied, destination_path)

            # O_CREAT's mode is filtered by umask and ignored for existing files
            try:
                os.chmod(destination_path, mode)
            except OSError as exc:
                raise PermissionSetError(destination_path, exc) from exc

            try:
                os.fsync(dst_fd)
            except OSError as exc:
                raise FlushError(destination_path, exc) from exc
        except BaseException:
            _release(dst_fd, destination_path)
            raise

        # some filesystems (NFS) only report deferred write errors on close
        try:
            os.close(dst_fd)
        except OSError as exc:
            raise FlushError(destination_path, exc) from exc
    except BaseException:
        _release(src_fd, source_path)
        raise
    os.close(src_fd)

    logger.info("Copied %s -> %s (%d bytes, mode %o)", source_path, destination_path, copied, mode)
    return copied

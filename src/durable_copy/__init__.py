"""Copy a file's bytes and permission mode, fsynced before returning."""

from .errors import (
    CopyError,
    CopyFileError,
    DestinationOpenError,
    FlushError,
    MetadataError,
    PermissionSetError,
    SourceOpenError,
)
from .file_io import DEFAULT_BUFFER_SIZE, copy_file, copy_stream

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "CopyError",
    "CopyFileError",
    "DestinationOpenError",
    "FlushError",
    "MetadataError",
    "PermissionSetError",
    "SourceOpenError",
    "copy_file",
    "copy_stream",
]

"""Error taxonomy for copy_file, one class per failing step."""

from __future__ import annotations

import os


class CopyFileError(OSError):
    """Base class for copy failures.

    Keeps the errno, strerror and filename of the underlying OSError so that
    callers catching plain OSError still see the original details.
    """

    step = "copy file"

    def __init__(self, path: str | os.PathLike[str], cause: OSError) -> None:
        super().__init__(cause.errno, cause.strerror or str(cause), os.fspath(path))

    def __reduce__(self):
        # OSError pickles its (errno, strerror, filename) args, which do not
        # match this constructor
        return type(self), (self.filename, OSError(self.errno, self.strerror))

    def __str__(self) -> str:
        return f"{self.step} failed: {self.strerror}: {self.filename!r}"


class SourceOpenError(CopyFileError):
    step = "open source"


class MetadataError(CopyFileError):
    step = "stat source"


class DestinationOpenError(CopyFileError):
    step = "open destination"


class CopyError(CopyFileError):
    step = "copy"


class PermissionSetError(CopyFileError):
    step = "chmod destination"


class FlushError(CopyFileError):
    step = "fsync destination"

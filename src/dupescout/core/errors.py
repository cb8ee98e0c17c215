"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exceptions raised by the scanning and classification engine.

ScanError is fatal for a run (the root cannot be walked). FileReadError is
scoped to one file: the classifier logs it and skips that file.
"""

from typing import Optional


class DupescoutError(Exception):
    """Base class for all errors raised by dupescout."""


class ScanError(DupescoutError, RuntimeError):
    """The root directory is missing, not a directory, or unreadable."""


class FileReadError(DupescoutError, OSError):
    """
    A single file could not be stat'ed, opened or fully read.

    Attributes:
        path: The file that failed.
        reason: Short human-readable cause.
    """

    def __init__(self, path: str, reason: str, cause: Optional[BaseException] = None):
        super().__init__(f"Error reading {path}: {reason}")
        self.path = path
        self.reason = reason
        self.__cause__ = cause

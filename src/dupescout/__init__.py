"""
dupescout: find files with identical content under a directory tree.

Core features:
- Staged comparison: size -> inode -> header hash -> trailer hash -> full digest
- Hardlinks are recognised by inode and never reported as duplicates
- Lazy, memoized per-file attributes: nothing is read unless a stage needs it
- xxHash by default, SHA-256/BLAKE2b and byte-by-byte verification on demand
- Read-only: reports duplicates, never deletes or links them
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dupescout")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from dupescout.commands import DeduplicationCommand
from dupescout.core import (
    ScanConfig, DigestAlgorithm, DuplicateGroup, ScanStats, FileDescriptor,
    DuplicateClassifier, DuplicateStream, Aggregator, ScanError, FileReadError)
from dupescout.utils.convert_utils import ConvertUtils

__all__ = [
    "DeduplicationCommand",
    "ScanConfig",
    "DigestAlgorithm",
    "DuplicateGroup",
    "ScanStats",
    "FileDescriptor",
    "DuplicateClassifier",
    "DuplicateStream",
    "Aggregator",
    "ScanError",
    "FileReadError",
    "ConvertUtils",
    "__version__",
]

"""
Core duplicate-classification engine.

This package contains the performance-critical foundation of dupescout:
- FileDescriptor: lazy, memoized size/inode/header/trailer/digest per path
- SizeIndex + SizeBucket: size buckets, partitioned by header hash on demand
- DuplicateClassifier: size -> inode -> header -> trailer -> digest escalation
- DuplicateStream: pull-based (original, duplicate) pair iterator
- Aggregator: groups pairs, collapses hardlinks, sorts the result
- StatsCollector: counts how much hashing each run actually needed
- FileScannerImpl: os.walk based traversal feeding the stream

All components are pure Python and single-threaded.
"""

from .models import (
    ScanConfig, DigestAlgorithm, DuplicateGroup, ScanStats, Stage)
from .errors import DupescoutError, ScanError, FileReadError
from .hasher import HasherImpl, XXHashAlgorithmImpl, HashlibAlgorithmImpl, get_algorithm
from .descriptor import FileDescriptor
from .index import SizeIndex, SizeBucket, BucketKind
from .classifier import DuplicateClassifier
from .stream import DuplicateStream, StreamState
from .aggregator import Aggregator
from .stats import StatsCollector
from .scanner import FileScannerImpl

__all__ = [
    "ScanConfig",
    "DigestAlgorithm",
    "DuplicateGroup",
    "ScanStats",
    "Stage",
    "DupescoutError",
    "ScanError",
    "FileReadError",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "HashlibAlgorithmImpl",
    "get_algorithm",
    "FileDescriptor",
    "SizeIndex",
    "SizeBucket",
    "BucketKind",
    "DuplicateClassifier",
    "DuplicateStream",
    "StreamState",
    "Aggregator",
    "StatsCollector",
    "FileScannerImpl",
]

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate scanner.
Structural typing keeps the classifier independent of the concrete hashing
and traversal implementations, so tests can substitute instrumented doubles.

Key Components:
---------------
- HashState / HashAlgorithm: Incremental hash objects and their factories
  (xxHash, SHA-256, BLAKE2b).
- Hasher: Reads header/trailer windows and whole-file digests for a path.
- FileScanner: Lazily yields candidate file paths under a root.
- Classifier: Decides whether a descriptor duplicates a previously seen one.
"""

from typing import Protocol, Iterator, Optional, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from dupescout.core.descriptor import FileDescriptor


class HashState(Protocol):
    """An incremental hash object (the hashlib/xxhash calling convention)."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like SHA-256 or xxHash
    without affecting the rest of the classification logic.
    """

    def new(self) -> HashState:
        """Returns a fresh incremental hash object."""
        ...

    def hash(self, data: bytes) -> bytes:
        """Computes the hash of the provided byte data."""
        ...


class Hasher(Protocol):
    """Interface for hashing different parts of a file."""
    def compute_header_hash(self, path: str, size: int) -> bytes: ...
    def compute_trailer_hash(self, path: str, size: int) -> bytes: ...
    def compute_full_hash(self, path: str, size: int) -> bytes: ...
    def same_content(self, path_a: str, path_b: str) -> bool: ...


class FileScanner(Protocol):
    """
    Interface for the traversal collaborator.

    Methods:
        iter_paths: Lazily yields file paths under the configured root.
    """
    def iter_paths(self, stopped_flag: Optional[Callable[[], bool]] = None) -> Iterator[str]:
        """
        Args:
            stopped_flag: Function that returns True if traversal should stop.

        Returns:
            Iterator of file paths; may be consumed partially.
        """
        ...


class Classifier(Protocol):
    """
    Interface for the duplicate classifier.

    Methods:
        classify: Returns the original a descriptor duplicates, or None when
                  the descriptor is new (or had to be skipped).
    """
    def classify(self, file: 'FileDescriptor') -> Optional['FileDescriptor']: ...

    def skip(self, file: 'FileDescriptor', error: Exception) -> None: ...

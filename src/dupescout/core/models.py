"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for duplicate classification: enums, scan configuration,
duplicate groups and run statistics.
"""

from dataclasses import dataclass
from typing import Tuple, Optional, TYPE_CHECKING
from enum import Enum

from dupescout.utils.convert_utils import ConvertUtils

if TYPE_CHECKING:
    from dupescout.core.descriptor import FileDescriptor


DEFAULT_SMALL_FILE_THRESHOLD = 1024
DEFAULT_HASH_WINDOW_SIZE = 1024
DEFAULT_CHUNK_SIZE = 1024 * 1024


# =============================
# Enums
# =============================

class DigestAlgorithm(Enum):
    """
    Algorithm used for the whole-file content digest.

    The fast xxHash variants are not collision resistant: when one of them is
    the final arbiter, two different files with the same digest would be
    reported as duplicates. The cryptographic variants make that practically
    impossible at the cost of throughput.
    """
    XXH64 = "xxh64"
    XXH128 = "xxh128"
    SHA256 = "sha256"
    BLAKE2B = "blake2b"

    @property
    def is_cryptographic(self) -> bool:
        return self in (DigestAlgorithm.SHA256, DigestAlgorithm.BLAKE2B)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            DigestAlgorithm.XXH64: "xxHash64 (fastest, non-cryptographic)",
            DigestAlgorithm.XXH128: "xxHash3 128-bit (fast, non-cryptographic)",
            DigestAlgorithm.SHA256: "SHA-256 (slow, cryptographic)",
            DigestAlgorithm.BLAKE2B: "BLAKE2b (cryptographic)",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    SIZE = "Size"
    INODE = "Inode"
    HEADER = "Header Hash"
    TRAILER = "Trailer Hash"
    DIGEST = "Content Digest"
    VERIFY = "Byte Verification"


# =============================
# Configuration
# =============================

@dataclass(frozen=True)
class ScanConfig:
    """
    Immutable run configuration, built once and shared by reference with
    every descriptor, the classifier and the traversal.
    """
    root_dir: str
    small_file_threshold: int = DEFAULT_SMALL_FILE_THRESHOLD
    hash_window_size: int = DEFAULT_HASH_WINDOW_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    digest_algorithm: DigestAlgorithm = DigestAlgorithm.XXH64
    verify_content: bool = False
    max_files: int = 0
    report_stats: bool = False
    follow_symlinks: bool = False
    sort_paths: bool = True
    excluded_dirs: Tuple[str, ...] = ()

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.small_file_threshold < 0:
            raise ValueError("Small file threshold cannot be negative")

        if self.hash_window_size <= 0:
            raise ValueError("Hash window size must be positive")

        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")

        if self.max_files < 0:
            raise ValueError("Maximum number of files cannot be negative")

        if not isinstance(self.digest_algorithm, DigestAlgorithm):
            # frozen dataclass: bypass __setattr__ to coerce "sha256" -> enum
            object.__setattr__(self, "digest_algorithm", DigestAlgorithm(self.digest_algorithm))

        object.__setattr__(self, "excluded_dirs", tuple(self.excluded_dirs))

    @property
    def has_scan_limit(self) -> bool:
        return self.max_files > 0

    @staticmethod
    def from_human_readable(
            root_dir: str,
            small_file: str = str(DEFAULT_SMALL_FILE_THRESHOLD),
            hash_size: str = str(DEFAULT_HASH_WINDOW_SIZE),
            chunk: str = "1M",
            digest: str = DigestAlgorithm.XXH64.value,
            **kwargs,
    ) -> 'ScanConfig':
        """
        Factory method to create a config from human-readable sizes.
        Useful for CLI argument parsing.
        """
        return ScanConfig(
            root_dir=root_dir,
            small_file_threshold=ConvertUtils.human_to_bytes(small_file),
            hash_window_size=ConvertUtils.human_to_bytes(hash_size),
            chunk_size=ConvertUtils.human_to_bytes(chunk),
            digest_algorithm=DigestAlgorithm(digest),
            **kwargs,
        )


# ======================
#  Results
# ======================

@dataclass(frozen=True)
class DuplicateGroup:
    """
    Files with identical content, one per distinct inode, sorted by path.
    The first member is the group's original.
    """
    files: Tuple['FileDescriptor', ...]

    @property
    def original(self) -> 'FileDescriptor':
        return self.files[0]

    @property
    def duplicates(self) -> Tuple['FileDescriptor', ...]:
        return self.files[1:]

    @property
    def size(self) -> int:
        return self.original.size

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(f.path for f in self.files)

    @property
    def reclaimable_bytes(self) -> int:
        """Bytes freed if every member but one were removed."""
        return self.size * (len(self.files) - 1)

    def __len__(self) -> int:
        return len(self.files)

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}>"


@dataclass
class ScanStats:
    """
    Counters describing how far descriptors travelled through the pipeline.
    A low digest count relative to the file count is I/O that was saved.
    """
    files: int = 0
    skipped: int = 0
    stat: int = 0
    header: int = 0
    trailer: int = 0
    digest: int = 0
    groups: int = 0
    duplicate_files: int = 0
    reclaimable_bytes: int = 0
    total_time: float = 0.0
    scan_limit: Optional[int] = None

    def print_summary(self) -> str:
        lines = [
            "Duplicate Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Files registered: {self.files} (skipped: {self.skipped})",
        ]
        if self.scan_limit:
            lines.append(f"Scan limit: {self.scan_limit} files")

        lines.append("Attribute: COMPUTED / FILES")
        for label, count in (
                ("Stat", self.stat),
                (Stage.HEADER.value, self.header),
                (Stage.TRAILER.value, self.trailer),
                (Stage.DIGEST.value, self.digest),
        ):
            lines.append(f"{label}: {count} / {self.files}")

        lines.append(f"Duplicate groups: {self.groups} ({self.duplicate_files} redundant files)")
        lines.append(f"Reclaimable space: {ConvertUtils.bytes_to_human(self.reclaimable_bytes)}")
        return "\n".join(lines)

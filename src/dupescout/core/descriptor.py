"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/descriptor.py
Lazy, memoized view over one path's metadata and content hashes.

Every attribute is computed on first access and cached for the rest of the
run; files are assumed not to change while a scan is in progress. Slots keep
the per-file footprint small, since every descriptor lives until the run ends.
"""

import os
import stat
from typing import Optional, Tuple

from dupescout.core.errors import FileReadError
from dupescout.core.hasher import HasherImpl
from dupescout.core.interfaces import Hasher
from dupescout.core.models import ScanConfig

# Returned by header/trailer hashes of files at or below the small-file
# threshold: every exempt file matches every other on these attributes.
EXEMPT_HASH = b""


class FileDescriptor:
    """
    Represents a single file on the file system.

    size, inode and hardlink_count share a single lazy stat call.
    header_hash, trailer_hash and content_digest each cost one open+read.
    Any of them raises FileReadError if the file vanished or shrank.
    """

    __slots__ = (
        "path", "config", "_hasher",
        "_size", "_inode", "_nlink", "_mode",
        "_header_hash", "_trailer_hash", "_content_digest",
    )

    def __init__(self, path: str, config: ScanConfig, hasher: Optional[Hasher] = None):
        self.path = path
        self.config = config
        self._hasher = hasher or HasherImpl.from_config(config)

        self._size: Optional[int] = None
        self._inode: Optional[Tuple[int, int]] = None
        self._nlink: Optional[int] = None
        self._mode: Optional[int] = None

        self._header_hash: Optional[bytes] = None
        self._trailer_hash: Optional[bytes] = None
        self._content_digest: Optional[bytes] = None

    # ----------------------
    # Metadata
    # ----------------------

    def _stat(self) -> None:
        if self._size is not None:
            return
        try:
            st = os.stat(self.path)
        except OSError as e:
            raise FileReadError(self.path, str(e), e) from e
        self._mode = st.st_mode
        self._inode = (st.st_dev, st.st_ino)
        self._nlink = st.st_nlink
        self._size = st.st_size

    @property
    def size(self) -> int:
        self._stat()
        return self._size

    @property
    def inode(self) -> Tuple[int, int]:
        """(device, inode number): equal values mean the same physical data."""
        self._stat()
        return self._inode

    @property
    def hardlink_count(self) -> int:
        """Number of other directory entries pointing at this inode."""
        self._stat()
        return self._nlink - 1

    @property
    def is_regular_file(self) -> bool:
        self._stat()
        return stat.S_ISREG(self._mode)

    @property
    def is_hash_exempt(self) -> bool:
        return self.size <= self.config.small_file_threshold

    # ----------------------
    # Content hashes
    # ----------------------

    @property
    def header_hash(self) -> bytes:
        if self._header_hash is None:
            if self.is_hash_exempt:
                return EXEMPT_HASH
            self._header_hash = self._hasher.compute_header_hash(self.path, self.size)
        return self._header_hash

    @property
    def trailer_hash(self) -> bytes:
        if self._trailer_hash is None:
            if self.is_hash_exempt:
                return EXEMPT_HASH
            self._trailer_hash = self._hasher.compute_trailer_hash(self.path, self.size)
        return self._trailer_hash

    @property
    def content_digest(self) -> bytes:
        if self._content_digest is None:
            self._content_digest = self._hasher.compute_full_hash(self.path, self.size)
        return self._content_digest

    def same_content(self, other: 'FileDescriptor') -> bool:
        """Byte-by-byte comparison, uncached. Sizes are assumed equal."""
        return self._hasher.same_content(self.path, other.path)

    # ----------------------
    # Which attributes hit the disk
    # ----------------------

    @property
    def has_stat(self) -> bool:
        return self._size is not None

    @property
    def has_header_hash(self) -> bool:
        return self._header_hash is not None

    @property
    def has_trailer_hash(self) -> bool:
        return self._trailer_hash is not None

    @property
    def has_content_digest(self) -> bool:
        return self._content_digest is not None

    def __repr__(self):
        size = self._size if self._size is not None else "?"
        return f"<FileDescriptor path={self.path}, size={size}>"

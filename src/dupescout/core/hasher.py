"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing utilities with pluggable hash algorithms.

HasherImpl reads exactly what each classification stage needs:
- header window: the first N bytes (seek 0)
- trailer window: the last N bytes (seek from the end)
- full digest: the whole file, streamed in fixed-size chunks

Windows are clamped to the file size, so a file shorter than the window is
hashed in full. A file that yields fewer bytes than its stat'ed size
promised was truncated after stat and raises FileReadError.
Caching is the descriptor's job, not the hasher's.
"""

import hashlib
import logging
from typing import Dict, Optional

import xxhash

from dupescout.core.errors import FileReadError
from dupescout.core.interfaces import Hasher, HashAlgorithm, HashState
from dupescout.core.models import DigestAlgorithm, ScanConfig

logger = logging.getLogger(__name__)


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    def __init__(self, variant=xxhash.xxh64):
        self.variant = variant

    def new(self) -> HashState:
        return self.variant()

    def hash(self, data: bytes) -> bytes:
        return self.variant(data).digest()


class HashlibAlgorithmImpl(HashAlgorithm):
    def __init__(self, name: str):
        self.name = name

    def new(self) -> HashState:
        return hashlib.new(self.name)

    def hash(self, data: bytes) -> bytes:
        return hashlib.new(self.name, data).digest()


_ALGORITHMS: Dict[DigestAlgorithm, HashAlgorithm] = {
    DigestAlgorithm.XXH64: XXHashAlgorithmImpl(xxhash.xxh64),
    DigestAlgorithm.XXH128: XXHashAlgorithmImpl(xxhash.xxh3_128),
    DigestAlgorithm.SHA256: HashlibAlgorithmImpl("sha256"),
    DigestAlgorithm.BLAKE2B: HashlibAlgorithmImpl("blake2b"),
}


def get_algorithm(algorithm: DigestAlgorithm) -> HashAlgorithm:
    """Returns the shared implementation for a digest algorithm."""
    return _ALGORITHMS[algorithm]


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.

    Window hashes always use xxHash64: they only pre-filter candidates, so a
    collision costs an extra comparison, never a false duplicate.
    """

    def __init__(
            self,
            algorithm: HashAlgorithm,
            window_size: int,
            chunk_size: int,
            window_algorithm: Optional[HashAlgorithm] = None
    ):
        self.algorithm = algorithm
        self.window_algorithm = window_algorithm or _ALGORITHMS[DigestAlgorithm.XXH64]
        self.window_size = window_size
        self.chunk_size = chunk_size

    @classmethod
    def from_config(cls, config: ScanConfig) -> 'HasherImpl':
        return cls(
            algorithm=get_algorithm(config.digest_algorithm),
            window_size=config.hash_window_size,
            chunk_size=config.chunk_size,
        )

    def compute_header_hash(self, path: str, size: int) -> bytes:
        """Hash of the first window_size bytes of a file."""
        data = self._read_window(path, size, offset=0)
        return self.window_algorithm.hash(data)

    def compute_trailer_hash(self, path: str, size: int) -> bytes:
        """Hash of the last window_size bytes of a file."""
        offset = max(0, size - self.window_size)
        data = self._read_window(path, size, offset=offset)
        return self.window_algorithm.hash(data)

    def compute_full_hash(self, path: str, size: int) -> bytes:
        """Digest of the whole file, read chunk by chunk to bound memory."""
        logger.debug(f"Computing full digest of {path} ({size} bytes)")
        state = self.algorithm.new()
        total = 0
        try:
            with open(path, 'rb') as f:
                while True:
                    chunk = f.read(self.chunk_size)
                    if not chunk:
                        break
                    state.update(chunk)
                    total += len(chunk)
        except OSError as e:
            raise FileReadError(path, str(e), e) from e

        if total < size:
            raise FileReadError(path, f"truncated to {total} of {size} bytes during read")
        return state.digest()

    def same_content(self, path_a: str, path_b: str) -> bool:
        """
        Compares two files byte by byte. Assumes equal sizes.
        Raises FileReadError naming whichever file failed to open or read.
        """
        try:
            this = open(path_a, 'rb')
        except OSError as e:
            raise FileReadError(path_a, str(e), e) from e

        with this:
            try:
                that = open(path_b, 'rb')
            except OSError as e:
                raise FileReadError(path_b, str(e), e) from e

            with that:
                while True:
                    x = self._read_chunk(this, path_a)
                    y = self._read_chunk(that, path_b)
                    if x != y:
                        return False
                    if not x:
                        return True

    def _read_chunk(self, handle, path: str) -> bytes:
        try:
            return handle.read(self.chunk_size)
        except OSError as e:
            raise FileReadError(path, str(e), e) from e

    def _read_window(self, path: str, size: int, offset: int) -> bytes:
        """Reads min(window_size, size) bytes from offset, failing on short reads."""
        expected = min(self.window_size, size)
        try:
            with open(path, 'rb') as f:
                f.seek(offset)
                data = f.read(expected)
        except OSError as e:
            raise FileReadError(path, f"{e} (offset {offset})", e) from e

        if len(data) < expected:
            raise FileReadError(path, f"short read at offset {offset}: {len(data)} of {expected} bytes")
        return data

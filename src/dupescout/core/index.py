"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/index.py
Size-keyed index of every descriptor registered during a run.

A SizeBucket starts FLAT: a plain list whose members all agree on their
header hash (they were either hardlinks of each other, zero-sized, exempt
from window hashing, or confirmed to share a header). The first time an
incoming file disagrees with the bucket on its header hash, the bucket is
promoted to PARTITIONED: a dict keyed by header hash. From then on a file is
compared only against the partition matching its own header, so most size
collisions are settled by reading one small window.

The index never evicts. Memory grows with the number of files scanned.
"""

import logging
from enum import Enum
from itertools import chain
from typing import Dict, Iterator, List, Optional

from dupescout.core.descriptor import FileDescriptor
from dupescout.core.errors import FileReadError

logger = logging.getLogger(__name__)

# Partition key for members whose header could not be read at promotion time.
# No header hash ever equals it, so those members are retained but unreachable.
UNREADABLE_KEY = None


class BucketKind(Enum):
    FLAT = "flat"
    PARTITIONED = "partitioned"


class SizeBucket:
    """All registered descriptors of one size."""

    __slots__ = ("size", "kind", "_members", "_partitions", "_representative")

    def __init__(self, size: int, first: FileDescriptor):
        self.size = size
        self.kind = BucketKind.FLAT
        self._members: List[FileDescriptor] = [first]
        self._partitions: Dict[Optional[bytes], List[FileDescriptor]] = {}
        self._representative: Optional[bytes] = None

    @property
    def is_partitioned(self) -> bool:
        return self.kind is BucketKind.PARTITIONED

    def first(self) -> FileDescriptor:
        """Earliest registered member of a flat bucket."""
        if self.is_partitioned:
            return next(iter(self))
        return self._members[0]

    def representative_hash(self) -> Optional[bytes]:
        """
        Header hash shared by all members of a flat bucket.
        Tries members in order, so one vanished file does not hide the rest.
        The first readable hash is remembered: an unreadable member is opened
        once, not once per incoming file. Returns UNREADABLE_KEY if no member
        can be read.
        """
        if self._representative is not None:
            return self._representative
        for member in self._members:
            try:
                self._representative = member.header_hash
                return self._representative
            except FileReadError as e:
                logger.warning(f"Cannot read header of registered file: {e}")
        return UNREADABLE_KEY

    def candidates_for(self, header_hash: bytes) -> List[FileDescriptor]:
        """Members that agree with header_hash. Only valid once partitioned."""
        return self._partitions.get(header_hash, [])

    def promote(self, representative: Optional[bytes]) -> None:
        """FLAT -> PARTITIONED, filing every existing member under the shared header."""
        if self.is_partitioned:
            return
        logger.debug(f"Partitioning size bucket {self.size} ({len(self._members)} members)")
        self._partitions[representative] = self._members
        self._members = []
        self.kind = BucketKind.PARTITIONED

    def add(self, descriptor: FileDescriptor, header_hash: Optional[bytes] = None) -> None:
        """
        Files a descriptor. A partitioned bucket needs its header hash; a flat
        one ignores it, since flat members agree on the header by construction.
        """
        if self.is_partitioned:
            self._partitions.setdefault(header_hash, []).append(descriptor)
        else:
            self._members.append(descriptor)

    def add_alongside(self, descriptor: FileDescriptor, member: FileDescriptor) -> None:
        """Files a descriptor next to an existing member without hashing it."""
        if not self.is_partitioned:
            self._members.append(descriptor)
            return
        for partition in self._partitions.values():
            if any(m is member for m in partition):
                partition.append(descriptor)
                return
        raise ValueError(f"{member.path} is not a member of this bucket")

    def __iter__(self) -> Iterator[FileDescriptor]:
        if self.is_partitioned:
            return chain.from_iterable(self._partitions.values())
        return iter(self._members)

    def __len__(self) -> int:
        if self.is_partitioned:
            return sum(len(p) for p in self._partitions.values())
        return len(self._members)

    def __repr__(self):
        return f"<SizeBucket size={self.size}, kind={self.kind.value}, count={len(self)}>"


class SizeIndex:
    """Maps file size to its SizeBucket."""

    def __init__(self):
        self._buckets: Dict[int, SizeBucket] = {}

    def lookup(self, size: int) -> Optional[SizeBucket]:
        return self._buckets.get(size)

    def insert(self, descriptor: FileDescriptor) -> SizeBucket:
        """Registers the first descriptor of a size as a new flat bucket."""
        size = descriptor.size
        if size in self._buckets:
            raise ValueError(f"Size {size} already has a bucket")
        bucket = SizeBucket(size, descriptor)
        self._buckets[size] = bucket
        return bucket

    def all_descriptors(self) -> Iterator[FileDescriptor]:
        for bucket in self._buckets.values():
            yield from bucket

    def __len__(self) -> int:
        return sum(len(b) for b in self._buckets.values())

    def bucket_count(self) -> int:
        return len(self._buckets)

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/classifier.py
Decides, one file at a time, whether a file duplicates one seen earlier.

ESCALATION ORDER
----------------
Each step is only taken when every cheaper step was inconclusive:

  1. Size        : no registered file of this size -> new original
  2. Zero bytes  : every empty file duplicates the first one
  3. Inode       : a same-size member sharing (dev, inode) is the same data;
                   no hashing at all
  4. Header hash : first window; flat buckets are partitioned on mismatch
  5. Trailer hash: last window; catches files sharing a long prefix
  6. Digest      : whole file with the configured algorithm
  7. Verify      : optional byte-by-byte comparison after a digest match

COLLISION POLICY
----------------
With a non-cryptographic digest (xxh64, xxh128) and verification off, two
different files with equal size, windows and digest would be reported as
duplicates. That tradeoff is accepted for speed. Pick sha256/blake2b or
enable verify_content when it is not acceptable.

ERRORS
------
A FileReadError raised for the incoming file skips that file: it is logged,
recorded in `skipped` and never registered. A FileReadError raised for a
registered candidate only means that candidate does not match.
"""

import logging
from typing import Dict, List, Optional

from dupescout.core.descriptor import FileDescriptor
from dupescout.core.errors import FileReadError
from dupescout.core.index import SizeBucket, SizeIndex
from dupescout.core.interfaces import Classifier
from dupescout.core.models import ScanConfig, Stage

logger = logging.getLogger(__name__)


class DuplicateClassifier(Classifier):
    """
    Classifies descriptors against everything registered so far.

    Originals and confirmed duplicates are both registered, so later files can
    hit the inode shortcut against a duplicate too. Each registered path
    remembers its original, and matches are always reported against it.
    """

    def __init__(self, config: ScanConfig, index: Optional[SizeIndex] = None):
        self.config = config
        self.index = index or SizeIndex()
        self.skipped: List[str] = []
        self._original_of: Dict[str, FileDescriptor] = {}

        if not config.digest_algorithm.is_cryptographic and not config.verify_content:
            logger.debug(
                f"Content digest {config.digest_algorithm.value} is non-cryptographic "
                f"and is the final arbiter of equality"
            )

    def classify(self, file: FileDescriptor) -> Optional[FileDescriptor]:
        """
        Returns the original that `file` duplicates, or None if it is new.
        Either way the file is registered unless it had to be skipped.
        """
        if file.path in self._original_of:
            logger.debug(f"Ignoring already classified path: {file.path}")
            return None

        try:
            return self._classify(file)
        except FileReadError as e:
            if e.path != file.path:
                raise
            self.skip(file, e)
            return None

    def skip(self, file: FileDescriptor, error: Exception) -> None:
        logger.warning(f"Skipping {file.path}: {error}")
        self.skipped.append(file.path)

    def _classify(self, file: FileDescriptor) -> Optional[FileDescriptor]:
        bucket = self.index.lookup(file.size)
        if bucket is None:
            logger.debug(f"[{Stage.SIZE.value}] new size {file.size}: {file.path}")
            self.index.insert(file)
            self._original_of[file.path] = file
            return None

        if file.size == 0:
            return self._register_duplicate(bucket, file, bucket.first())

        inode = file.inode
        for candidate in bucket:
            if candidate.inode == inode:
                logger.debug(f"[{Stage.INODE.value}] {file.path} is a hardlink of {candidate.path}")
                return self._register_duplicate(bucket, file, candidate)

        header = file.header_hash
        for candidate in self._header_candidates(bucket, header):
            if self._same_content(candidate, file):
                return self._register_duplicate(bucket, file, candidate, header)

        bucket.add(file, header)
        self._original_of[file.path] = file
        return None

    @staticmethod
    def _header_candidates(bucket: SizeBucket, header: bytes) -> List[FileDescriptor]:
        """
        Members sharing `header`. A flat bucket that disagrees with it is
        partitioned here, which is the only place a bucket changes kind.
        """
        if bucket.is_partitioned:
            return bucket.candidates_for(header)

        representative = bucket.representative_hash()
        if representative == header:
            return list(bucket)

        logger.debug(f"[{Stage.HEADER.value}] mismatch in size bucket {bucket.size}")
        bucket.promote(representative)
        return []

    def _same_content(self, candidate: FileDescriptor, file: FileDescriptor) -> bool:
        """Trailer, digest and optional verification of one candidate."""
        try:
            if candidate.trailer_hash != file.trailer_hash:
                logger.debug(f"[{Stage.TRAILER.value}] {file.path} differs from {candidate.path}")
                return False

            if candidate.content_digest != file.content_digest:
                logger.debug(f"[{Stage.DIGEST.value}] {file.path} differs from {candidate.path}")
                return False

            if self.config.verify_content and not candidate.same_content(file):
                logger.warning(
                    f"[{Stage.VERIFY.value}] digest collision between {candidate.path} and {file.path}"
                )
                return False
        except FileReadError as e:
            if e.path == file.path:
                raise
            logger.warning(f"Cannot compare against {candidate.path}: {e.reason}")
            return False

        return True

    def _register_duplicate(
            self,
            bucket: SizeBucket,
            file: FileDescriptor,
            match: FileDescriptor,
            header: Optional[bytes] = None
    ) -> FileDescriptor:
        original = self._original_of[match.path]
        if header is None:
            bucket.add_alongside(file, match)
        else:
            bucket.add(file, header)
        self._original_of[file.path] = original
        return original

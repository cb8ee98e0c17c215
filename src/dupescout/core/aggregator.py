"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/aggregator.py
Turns the pair stream into final duplicate groups.

Sorted, grouped output cannot be produced incrementally: a later pair may
belong to an original seen long ago. The aggregator therefore buffers every
pair before emitting anything, so memory grows with the number of duplicates.
Use the stream directly when incremental output matters more than grouping.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple

from dupescout.core.descriptor import FileDescriptor
from dupescout.core.models import DuplicateGroup

logger = logging.getLogger(__name__)


class Aggregator:
    """
    Groups (original, duplicate) pairs by original, collapses hardlinks and
    drops groups that do not represent real duplication.

    The result is computed once; later calls return the cached groups.
    """

    def __init__(self, pairs: Iterable[Tuple[FileDescriptor, FileDescriptor]]):
        self._pairs = pairs
        self._groups: Optional[List[DuplicateGroup]] = None

    def all_dupes(self) -> List[DuplicateGroup]:
        if self._groups is None:
            self._groups = self._aggregate()
        return list(self._groups)

    def _aggregate(self) -> List[DuplicateGroup]:
        members: Dict[str, List[FileDescriptor]] = defaultdict(list)
        for original, duplicate in self._pairs:
            group = members[original.path]
            if not group:
                group.append(original)
            group.append(duplicate)

        groups = []
        for original_path, files in members.items():
            collapsed = self.collapse_hardlinks(files)
            if len(collapsed) < 2:
                logger.debug(f"Dropping hardlink-only group of {original_path}")
                continue
            groups.append(DuplicateGroup(files=tuple(collapsed)))

        groups.sort(key=lambda g: g.original.path)
        logger.debug(f"Aggregated {len(groups)} duplicate groups")
        return groups

    @staticmethod
    def collapse_hardlinks(files: List[FileDescriptor]) -> List[FileDescriptor]:
        """
        Sorts by path, drops repeated paths, then keeps the first path of
        each inode: several names for one inode occupy the space only once.
        """
        seen_paths: Set[str] = set()
        seen_inodes: Set[Tuple[int, int]] = set()
        result = []
        for file in sorted(files, key=lambda f: f.path):
            if file.path in seen_paths or file.inode in seen_inodes:
                continue
            seen_paths.add(file.path)
            seen_inodes.add(file.inode)
            result.append(file)
        return result

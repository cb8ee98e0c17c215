"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stats.py
Post-run diagnostics: how many registered files reached each lazy attribute.
"""

from typing import List, Optional

from dupescout.core.index import SizeIndex
from dupescout.core.models import DuplicateGroup, ScanStats


class StatsCollector:
    """Read-only pass over an index after a run; never affects classification."""

    def __init__(self, index: SizeIndex):
        self.index = index

    def collect(
            self,
            groups: List[DuplicateGroup],
            skipped: int = 0,
            total_time: float = 0.0,
            scan_limit: Optional[int] = None
    ) -> ScanStats:
        stats = ScanStats(skipped=skipped, total_time=total_time, scan_limit=scan_limit)

        for file in self.index.all_descriptors():
            stats.files += 1
            stats.stat += file.has_stat
            stats.header += file.has_header_hash
            stats.trailer += file.has_trailer_hash
            stats.digest += file.has_content_digest

        stats.groups = len(groups)
        stats.duplicate_files = sum(len(g) - 1 for g in groups)
        stats.reclaimable_bytes = sum(g.reclaimable_bytes for g in groups)
        return stats

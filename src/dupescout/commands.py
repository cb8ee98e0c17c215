"""
Unified command orchestrator for duplicate scanning.
This is the single entry point for library users and the CLI alike.
"""
import time
import logging
from typing import List, Optional, Callable, Tuple

from dupescout.core.models import DuplicateGroup, ScanConfig, ScanStats
from dupescout.core.scanner import FileScannerImpl
from dupescout.core.classifier import DuplicateClassifier
from dupescout.core.stream import DuplicateStream
from dupescout.core.aggregator import Aggregator
from dupescout.core.stats import StatsCollector

logger = logging.getLogger(__name__)


class DeduplicationCommand:
    """
    Wires traversal, classifier, stream and aggregator for one run.

    Usage:
        # Grouped, sorted result:
        config = ScanConfig(root_dir="/data")
        command = DeduplicationCommand()
        groups, stats = command.execute(config)

        # Pairs as they are discovered:
        for original, duplicate in command.iter_pairs(config):
            ...

    One command runs one scan; the classifier and its index are kept for
    inspection until the next call.
    """

    def __init__(self):
        self.classifier: Optional[DuplicateClassifier] = None
        self.stream: Optional[DuplicateStream] = None

    def iter_pairs(
            self,
            config: ScanConfig,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> DuplicateStream:
        """
        Build a fresh stream over config.root_dir.

        Raises:
            ScanError: If the root directory cannot be scanned
        """
        scanner = FileScannerImpl.from_config(config)
        paths = scanner.iter_paths(stopped_flag=stopped_flag)

        self.classifier = DuplicateClassifier(config)
        self.stream = DuplicateStream(
            config,
            paths,
            classifier=self.classifier,
            stopped_flag=stopped_flag
        )
        return self.stream

    def execute(
            self,
            config: ScanConfig,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[List[DuplicateGroup], ScanStats]:
        """
        Run a full scan and aggregate the result.

        Returns:
            Tuple of (duplicate_groups, statistics)

        Raises:
            ScanError: If the root directory cannot be scanned
        """
        start_time = time.time()
        stream = self.iter_pairs(config, stopped_flag=stopped_flag)
        groups = Aggregator(stream).all_dupes()
        stats = self.collect_stats(groups, time.time() - start_time)

        logger.debug(f"Scanned {stream.files_scanned} files, found {len(groups)} duplicate groups")
        return groups, stats

    def collect_stats(self, groups: List[DuplicateGroup], total_time: float = 0.0) -> ScanStats:
        """Statistics for the last run; call after its stream is exhausted."""
        if self.classifier is None:
            raise RuntimeError("No scan has been run yet")
        config = self.classifier.config
        return StatsCollector(self.classifier.index).collect(
            groups,
            skipped=len(self.classifier.skipped),
            total_time=total_time,
            scan_limit=config.max_files or None,
        )

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stream.py
Pull-based iterator turning a path source into (original, duplicate) pairs.

Pairs come out in traversal order, as soon as each duplicate is found. The
stream is single-pass: once FINISHED (paths exhausted, the max_files budget
spent, or stopped_flag raised) it yields nothing more, even if new files
appear on disk.
"""

import logging
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional, Tuple

from dupescout.core.classifier import DuplicateClassifier
from dupescout.core.descriptor import FileDescriptor
from dupescout.core.errors import FileReadError
from dupescout.core.hasher import HasherImpl
from dupescout.core.interfaces import Classifier, Hasher
from dupescout.core.models import ScanConfig

logger = logging.getLogger(__name__)

DuplicatePair = Tuple[FileDescriptor, FileDescriptor]


class StreamState(Enum):
    SCANNING = "scanning"
    FINISHED = "finished"


class DuplicateStream:
    """
    Classifies each regular file from `paths` and yields the duplicates.

    Attributes:
        files_scanned: Regular files pulled so far (counted against max_files).
    """

    def __init__(
            self,
            config: ScanConfig,
            paths: Iterable[str],
            classifier: Optional[Classifier] = None,
            hasher: Optional[Hasher] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ):
        self.config = config
        self.classifier = classifier or DuplicateClassifier(config)
        self.hasher = hasher or HasherImpl.from_config(config)
        self.stopped_flag = stopped_flag
        self.state = StreamState.SCANNING
        self.files_scanned = 0
        self._paths: Iterator[str] = iter(paths)

    @property
    def finished(self) -> bool:
        return self.state is StreamState.FINISHED

    def __iter__(self) -> 'DuplicateStream':
        return self

    def __next__(self) -> DuplicatePair:
        while True:
            file = self.next_file()
            if file is None:
                raise StopIteration

            original = self.classifier.classify(file)
            if original is not None:
                return original, file

    def next_file(self) -> Optional[FileDescriptor]:
        """Next regular file from the traversal, or None once finished."""
        if self.finished:
            return None

        for path in self._paths:
            if self.stopped_flag and self.stopped_flag():
                logger.debug("Scan interrupted by stopped_flag")
                break

            file = FileDescriptor(path, self.config, self.hasher)
            try:
                if not file.is_regular_file:
                    logger.debug(f"Skipping non-regular file: {path}")
                    continue
            except FileReadError as e:
                self.classifier.skip(file, e)
                continue

            self.files_scanned += 1
            if self.config.has_scan_limit and self.files_scanned >= self.config.max_files:
                logger.debug(f"Scan limit of {self.config.max_files} files reached")
                self._finish()
            return file

        self._finish()
        return None

    def _finish(self) -> None:
        self.state = StreamState.FINISHED

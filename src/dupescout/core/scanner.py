"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements directory traversal for the duplicate stream.
Features:
- Lazily yields paths, so a scan limit stops the walk early
- Does not follow symbolic links unless asked to
- Optionally visits directories and files in sorted order (deterministic runs)
- Prunes excluded directories before descending into them
- Logs unreadable directories instead of aborting
"""

import os
import logging
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

# Local imports
from dupescout.core.errors import ScanError
from dupescout.core.interfaces import FileScanner
from dupescout.core.models import ScanConfig


class FileScannerImpl(FileScanner):
    """
    Walks a directory tree and yields file paths.

    Attributes:
        root_dir: Root directory to scan
        follow_symlinks: Yield symlinked files and descend into symlinked directories
        sort_paths: Visit entries in lexical order
        excluded_dirs: Resolved directories that are never entered
    """

    def __init__(
        self,
        root_dir: str,
        follow_symlinks: bool = False,
        sort_paths: bool = True,
        excluded_dirs: Optional[Sequence[str]] = None
    ):
        self.root_dir = root_dir
        self.follow_symlinks = follow_symlinks
        self.sort_paths = sort_paths
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []

    @classmethod
    def from_config(cls, config: ScanConfig) -> 'FileScannerImpl':
        return cls(
            root_dir=config.root_dir,
            follow_symlinks=config.follow_symlinks,
            sort_paths=config.sort_paths,
            excluded_dirs=config.excluded_dirs,
        )

    def validate_root(self) -> None:
        """Raises ScanError if the root cannot be walked at all."""
        root_path = Path(self.root_dir)
        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise ScanError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise ScanError(error_msg)
        if not os.access(root_path, os.R_OK | os.X_OK):
            error_msg = f"Directory is not readable: {self.root_dir}"
            logger.error(error_msg)
            raise ScanError(error_msg)

    def iter_paths(self, stopped_flag: Optional[Callable[[], bool]] = None) -> Iterator[str]:
        """
        Yields file paths under root_dir. The root is validated eagerly, when
        this method is called, rather than on first iteration.
        """
        self.validate_root()
        logger.debug(f"Scanning directory: {self.root_dir}")
        return self._walk(stopped_flag)

    def _walk(self, stopped_flag: Optional[Callable[[], bool]]) -> Iterator[str]:
        visited: Set[Tuple[int, int]] = set()
        if self.follow_symlinks:
            self._first_visit(self.root_dir, visited)

        for root, dirs, files in os.walk(self.root_dir, onerror=self._on_walk_error,
                                         followlinks=self.follow_symlinks):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                return

            # Pre-filter subdirectories BEFORE os.walk enters them
            dirs[:] = [d for d in dirs if not self._is_excluded(os.path.join(root, d))]
            if self.follow_symlinks:
                dirs[:] = [d for d in dirs if self._first_visit(os.path.join(root, d), visited)]

            if self.sort_paths:
                dirs.sort()
                files = sorted(files)

            for filename in files:
                path = os.path.join(root, filename)
                if not self.follow_symlinks and os.path.islink(path):
                    logger.debug(f"Skipping symbolic link: {path}")
                    continue
                yield path

    def _is_excluded(self, path: str) -> bool:
        """Check if path is one of, or within, the excluded directories."""
        if not self.excluded_dirs:
            return False
        try:
            path_str = str(Path(path).resolve(strict=False))
        except (OSError, RuntimeError):
            return False
        for excluded_dir in self.excluded_dirs:
            if path_str == excluded_dir or path_str.startswith(excluded_dir + os.sep):
                logger.debug(f"Skipping excluded directory: {path}")
                return True
        return False

    @staticmethod
    def _first_visit(path: str, visited: Set[Tuple[int, int]]) -> bool:
        """Guards symlink loops: each physical directory is entered once."""
        try:
            st = os.stat(path)
        except OSError as e:
            logger.warning(f"Cannot stat directory {path}: {e}")
            return False
        key = (st.st_dev, st.st_ino)
        if key in visited:
            logger.debug(f"Skipping already visited directory: {path}")
            return False
        visited.add(key)
        return True

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

    def list_paths(self) -> List[str]:
        """Eager variant of iter_paths, mostly for tests and small trees."""
        return list(self.iter_paths())

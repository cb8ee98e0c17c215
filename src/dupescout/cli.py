#!/usr/bin/env python3
"""
dupescout CLI: command line interface for duplicate file detection.
Prints duplicate groups (or pairs) as delimiter-separated lines.
Read-only: no file is ever moved, linked or deleted.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
import logging
from pathlib import Path
from typing import List, NoReturn, TextIO

from dupescout.core.aggregator import Aggregator
from dupescout.core.errors import ScanError
from dupescout.core.models import (
    DuplicateGroup, ScanConfig, DEFAULT_SMALL_FILE_THRESHOLD, DEFAULT_HASH_WINDOW_SIZE)
from dupescout.commands import DeduplicationCommand
from dupescout.aliases import DIGEST_ALIASES, DIGEST_CHOICES, DIGEST_HELP_TEXT, EPILOG_TEXT

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self, stdout: TextIO = None, stderr: TextIO = None):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupescout",
            description="dupescout: find files with identical content",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "--input", "-i",
            required=True,
            type=str,
            dest="root_dir",
            help="Directory to scan for duplicates"
        )

        # Hashing options
        parser.add_argument(
            "--small-file",
            default=str(DEFAULT_SMALL_FILE_THRESHOLD),
            type=str,
            metavar='SIZE',
            help="Files up to this size skip header/trailer hashing (e.g. 1K). "
                 f"Default: {DEFAULT_SMALL_FILE_THRESHOLD}"
        )
        parser.add_argument(
            "--hash-size",
            default=str(DEFAULT_HASH_WINDOW_SIZE),
            type=str,
            metavar='SIZE',
            help=f"Bytes hashed at the start and end of each file. Default: {DEFAULT_HASH_WINDOW_SIZE}"
        )
        parser.add_argument(
            "--chunk-size",
            default="1M",
            type=str,
            metavar='SIZE',
            help="Read size used for full digests and verification. Default: 1M"
        )
        parser.add_argument(
            "--digest",
            choices=DIGEST_CHOICES,
            default="xxh64",
            type=str,
            help=DIGEST_HELP_TEXT
        )
        parser.add_argument(
            "--verify",
            action="store_true",
            help="Confirm digest matches with a byte-by-byte comparison"
        )

        # Traversal options
        parser.add_argument(
            "--max-files",
            default=0,
            type=int,
            metavar='N',
            help="Stop after scanning N files (0 = no limit)"
        )
        parser.add_argument(
            "--follow-symlinks",
            action="store_true",
            help="Follow symbolic links to files and directories"
        )
        parser.add_argument(
            "--no-sort",
            action="store_true",
            help="Do not sort directory entries while walking (faster, less deterministic)"
        )
        parser.add_argument(
            "--excluded-dirs", '-e',
            nargs="+",
            default=[],
            type=str,
            metavar='DIR',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )

        # Output options
        parser.add_argument(
            "--pairs",
            action="store_true",
            help="Print 'original<sep>duplicate' pairs as they are found instead of groups"
        )
        parser.add_argument(
            "--separator",
            default="\t",
            type=str,
            help="Separator between paths on one line. Default: tab"
        )
        parser.add_argument(
            "--stats",
            action="store_true",
            help="Report statistics on stderr"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress warnings about unreadable files"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show debug logging"
        )

        return parser.parse_args(args)

    def configure_logging(self) -> None:
        if self.verbose:
            level = logging.DEBUG
        elif self.quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING
        logging.basicConfig(level=level, format=LOG_FORMAT, stream=self.stderr, force=True)

    def create_config(self, args: argparse.Namespace) -> ScanConfig:
        """Create ScanConfig from CLI arguments."""
        try:
            return ScanConfig.from_human_readable(
                root_dir=str(Path(args.root_dir).expanduser()),
                small_file=args.small_file,
                hash_size=args.hash_size,
                chunk=args.chunk_size,
                digest=DIGEST_ALIASES[args.digest].value,
                verify_content=args.verify,
                max_files=args.max_files,
                report_stats=args.stats,
                follow_symlinks=args.follow_symlinks,
                sort_paths=not args.no_sort,
                excluded_dirs=tuple(str(Path(d).expanduser()) for d in args.excluded_dirs),
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def format_line(self, paths: List[str], separator: str) -> str:
        return separator.join(paths)

    def print_pairs(self, command: DeduplicationCommand, config: ScanConfig, separator: str) -> List[DuplicateGroup]:
        """
        Streams pairs in discovery order. Pairs are only kept when statistics
        were requested, and are then grouped for the stats report.
        """
        pairs = []
        for original, duplicate in command.iter_pairs(config):
            print(self.format_line([original.path, duplicate.path], separator), file=self.stdout)
            if config.report_stats:
                pairs.append((original, duplicate))
        return Aggregator(pairs).all_dupes()

    def print_groups(self, groups: List[DuplicateGroup], separator: str) -> None:
        for group in groups:
            print(self.format_line(list(group.paths), separator), file=self.stdout)

    def report_stats(self, command: DeduplicationCommand, groups: List[DuplicateGroup]) -> None:
        stats = command.collect_stats(groups, time.time() - self.start_time)
        print("-" * 30, file=self.stderr)
        print(stats.print_summary(), file=self.stderr)

    def error_exit(self, message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=self.stderr)
        sys.exit(code)

    def run(self, args=None) -> None:
        """Main entry point."""
        args = self.parse_args(args)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        config = self.create_config(args)
        command = DeduplicationCommand()

        try:
            if args.pairs:
                groups = self.print_pairs(command, config, args.separator)
            else:
                groups, _ = command.execute(config)
                self.print_groups(groups, args.separator)
        except ScanError as e:
            self.error_exit(str(e))

        if config.report_stats:
            self.report_stats(command, groups)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

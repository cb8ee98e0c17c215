"""
Shared fixtures for dupescout tests.
Creates isolated temporary directories with controlled test files, and an
instrumented hasher that counts how often each kind of read happens.
"""
import os
import sys
from collections import Counter
from pathlib import Path
from typing import Callable

import pytest

# Add src/ to sys.path so 'dupescout' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from dupescout.core.hasher import HasherImpl, get_algorithm
from dupescout.core.models import ScanConfig


class CountingHasher(HasherImpl):
    """HasherImpl that records every header/trailer/full/verify read."""

    def __init__(self, config: ScanConfig):
        super().__init__(
            algorithm=get_algorithm(config.digest_algorithm),
            window_size=config.hash_window_size,
            chunk_size=config.chunk_size,
        )
        self.calls = Counter()

    def compute_header_hash(self, path, size):
        self.calls["header"] += 1
        return super().compute_header_hash(path, size)

    def compute_trailer_hash(self, path, size):
        self.calls["trailer"] += 1
        return super().compute_trailer_hash(path, size)

    def compute_full_hash(self, path, size):
        self.calls["full"] += 1
        return super().compute_full_hash(path, size)

    def same_content(self, path_a, path_b):
        self.calls["verify"] += 1
        return super().same_content(path_a, path_b)


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Isolated scan root, auto-cleanup after test."""
    root = tmp_path / "root"
    root.mkdir()
    return root


@pytest.fixture
def make_file(temp_dir) -> Callable[[str, bytes], str]:
    """Writes `content` to temp_dir/relative (creating parents) and returns the path."""
    def _make(relative: str, content: bytes) -> str:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)
    return _make


@pytest.fixture
def make_link(temp_dir) -> Callable[[str, str], str]:
    """Creates a hardlink temp_dir/relative -> target and returns its path."""
    def _link(target: str, relative: str) -> str:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        os.link(target, path)
        return str(path)
    return _link


@pytest.fixture
def config(temp_dir) -> ScanConfig:
    """Default configuration rooted at temp_dir (1 KiB windows and threshold)."""
    return ScanConfig(root_dir=str(temp_dir))


@pytest.fixture
def counting_hasher(config) -> CountingHasher:
    return CountingHasher(config)


@pytest.fixture
def payload() -> Callable[[int, int], bytes]:
    """Deterministic, non-uniform bytes so windows at different offsets differ."""
    def _payload(size: int, seed: int = 0) -> bytes:
        return bytes((i * 31 + seed * 17 + (i >> 8)) % 251 for i in range(size))
    return _payload

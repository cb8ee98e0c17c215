"""
Tests for DuplicateClassifier.
Each stage is only reached when every cheaper stage was inconclusive, so the
tests assert on how many reads of each kind actually happened.
"""
import os

import pytest

from dupescout.core.classifier import DuplicateClassifier
from dupescout.core.descriptor import FileDescriptor
from dupescout.core.models import ScanConfig

SIZE = 4096


@pytest.fixture
def classifier(config):
    return DuplicateClassifier(config)


@pytest.fixture
def describe(config, counting_hasher):
    def _describe(path, cfg=None):
        return FileDescriptor(path, cfg or config, counting_hasher)
    return _describe


def flip(content: bytes, offset: int) -> bytes:
    return content[:offset] + bytes([content[offset] ^ 0xFF]) + content[offset + 1:]


class TestEscalation:

    def test_first_file_of_a_size_is_original(self, make_file, payload, classifier, describe, counting_hasher):
        a = describe(make_file("a.bin", payload(SIZE)))

        assert classifier.classify(a) is None
        assert sum(counting_hasher.calls.values()) == 0

    def test_different_sizes_never_compared(self, make_file, payload, classifier, describe, counting_hasher):
        content = payload(SIZE)
        a = describe(make_file("a.bin", content))
        b = describe(make_file("b.bin", content + b"!"))

        assert classifier.classify(a) is None
        assert classifier.classify(b) is None
        assert sum(counting_hasher.calls.values()) == 0

    def test_empty_files_duplicate_the_first(self, make_file, classifier, describe, counting_hasher):
        a = describe(make_file("x/empty", b""))
        b = describe(make_file("y/empty", b""))
        c = describe(make_file("z/empty", b""))

        assert classifier.classify(a) is None
        assert classifier.classify(b) is a
        assert classifier.classify(c) is a
        assert sum(counting_hasher.calls.values()) == 0

    def test_hardlink_matched_by_inode_without_hashing(
            self, make_file, make_link, payload, classifier, describe, counting_hasher):
        path = make_file("a.bin", payload(SIZE))
        a = describe(path)
        b = describe(make_link(path, "b.bin"))

        assert classifier.classify(a) is None
        assert classifier.classify(b) is a
        assert sum(counting_hasher.calls.values()) == 0

    def test_header_mismatch_partitions_bucket(self, make_file, payload, classifier, describe, counting_hasher):
        content = payload(SIZE)
        a = describe(make_file("a.bin", content))
        b = describe(make_file("b.bin", flip(content, 0)))

        assert classifier.classify(a) is None
        assert classifier.classify(b) is None

        assert classifier.index.lookup(SIZE).is_partitioned
        assert counting_hasher.calls["header"] == 2
        assert counting_hasher.calls["trailer"] == 0
        assert counting_hasher.calls["full"] == 0

    def test_trailer_mismatch_stops_before_digest(self, make_file, payload, classifier, describe, counting_hasher):
        content = payload(SIZE)
        a = describe(make_file("a.bin", content))
        b = describe(make_file("b.bin", flip(content, SIZE - 1)))

        classifier.classify(a)
        assert classifier.classify(b) is None

        assert counting_hasher.calls["trailer"] == 2
        assert counting_hasher.calls["full"] == 0
        assert not a.has_content_digest
        assert not b.has_content_digest

    def test_digest_mismatch(self, make_file, payload, classifier, describe, counting_hasher):
        """Difference outside both windows is only caught by the full digest."""
        content = payload(SIZE)
        a = describe(make_file("a.bin", content))
        b = describe(make_file("b.bin", flip(content, SIZE // 2)))

        classifier.classify(a)
        assert classifier.classify(b) is None
        assert counting_hasher.calls["full"] == 2

    def test_identical_files(self, make_file, payload, classifier, describe, counting_hasher):
        content = payload(SIZE)
        a = describe(make_file("a.bin", content))
        b = describe(make_file("b.bin", content))

        classifier.classify(a)
        assert classifier.classify(b) is a
        assert counting_hasher.calls["header"] == 2
        assert counting_hasher.calls["trailer"] == 2
        assert counting_hasher.calls["full"] == 2
        assert counting_hasher.calls["verify"] == 0

    def test_small_files_skip_window_reads(self, make_file, payload, classifier, describe, counting_hasher):
        content = payload(100)
        a = describe(make_file("a.txt", content))
        b = describe(make_file("b.txt", content))

        classifier.classify(a)
        assert classifier.classify(b) is a
        assert counting_hasher.calls["header"] == 0
        assert counting_hasher.calls["trailer"] == 0
        assert counting_hasher.calls["full"] == 2

    def test_partition_only_compares_matching_header(
            self, make_file, payload, classifier, describe, counting_hasher):
        first = payload(SIZE, seed=0)
        second = payload(SIZE, seed=1)
        a = describe(make_file("a.bin", first))
        b = describe(make_file("b.bin", second))
        c = describe(make_file("c.bin", second))

        classifier.classify(a)
        classifier.classify(b)

        assert classifier.classify(c) is b
        assert not a.has_trailer_hash
        assert not a.has_content_digest


class TestRegistration:

    def test_hardlink_of_duplicate_reports_root_original(
            self, make_file, make_link, payload, classifier, describe):
        content = payload(SIZE)
        a = describe(make_file("a.bin", content))
        b_path = make_file("b.bin", content)
        b = describe(b_path)
        c = describe(make_link(b_path, "c.bin"))

        classifier.classify(a)
        assert classifier.classify(b) is a
        assert classifier.classify(c) is a
        assert not c.has_header_hash

    def test_every_classified_file_is_registered(self, make_file, payload, classifier, describe):
        content = payload(SIZE)
        for name in ("a.bin", "b.bin", "c.bin"):
            classifier.classify(describe(make_file(name, content)))

        assert len(classifier.index) == 3

    def test_repeated_path_is_ignored(self, make_file, payload, classifier, describe):
        path = make_file("a.bin", payload(SIZE))
        classifier.classify(describe(path))

        assert classifier.classify(describe(path)) is None
        assert len(classifier.index) == 1


class TestReadErrors:

    def test_vanished_incoming_file_is_skipped(self, make_file, payload, classifier, describe):
        content = payload(SIZE)
        a = describe(make_file("a.bin", content))
        b_path = make_file("b.bin", content)
        b = describe(b_path)
        classifier.classify(a)
        _ = b.size
        os.remove(b_path)

        assert classifier.classify(b) is None
        assert classifier.skipped == [b_path]
        assert len(classifier.index) == 1

    def test_unreadable_file_is_skipped_at_stat(self, temp_dir, payload, classifier, describe):
        missing = str(temp_dir / "missing.bin")

        assert classifier.classify(describe(missing)) is None
        assert classifier.skipped == [missing]

    def test_vanished_candidate_does_not_match(self, make_file, payload, classifier, describe):
        """A registered file that disappeared is not a match; no error escapes."""
        content = payload(SIZE)
        a_path = make_file("a.bin", content)
        a = describe(a_path)
        b = describe(make_file("b.bin", content))
        classifier.classify(a)
        os.remove(a_path)

        assert classifier.classify(b) is None
        assert classifier.skipped == []
        assert len(classifier.index) == 2

    def test_candidate_vanishing_after_header(self, make_file, payload, classifier, describe):
        content = payload(SIZE)
        a_path = make_file("a.bin", content)
        a = describe(a_path)
        b = describe(make_file("b.bin", content))
        classifier.classify(a)
        _ = a.header_hash
        os.remove(a_path)

        assert classifier.classify(b) is None
        assert classifier.skipped == []


class TestVerification:

    @pytest.fixture
    def colliding(self, monkeypatch, counting_hasher):
        """Every full digest collides, as a non-cryptographic digest might."""
        monkeypatch.setattr(counting_hasher, "compute_full_hash", lambda path, size: b"collide")
        return counting_hasher

    def test_collision_accepted_without_verification(self, make_file, payload, classifier, describe, colliding):
        content = payload(SIZE)
        a = describe(make_file("a.bin", content))
        b = describe(make_file("b.bin", flip(content, SIZE // 2)))

        classifier.classify(a)
        assert classifier.classify(b) is a

    def test_verification_rejects_collision(self, temp_dir, make_file, payload, describe, colliding):
        config = ScanConfig(root_dir=str(temp_dir), verify_content=True)
        classifier = DuplicateClassifier(config)
        content = payload(SIZE)
        a = describe(make_file("a.bin", content), config)
        b = describe(make_file("b.bin", flip(content, SIZE // 2)), config)

        classifier.classify(a)
        assert classifier.classify(b) is None
        assert colliding.calls["verify"] == 1

    def test_verification_confirms_real_duplicate(self, temp_dir, make_file, payload, describe, counting_hasher):
        config = ScanConfig(root_dir=str(temp_dir), verify_content=True)
        classifier = DuplicateClassifier(config)
        content = payload(SIZE)
        a = describe(make_file("a.bin", content), config)
        b = describe(make_file("b.bin", content), config)

        classifier.classify(a)
        assert classifier.classify(b) is a
        assert counting_hasher.calls["verify"] == 1

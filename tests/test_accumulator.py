"""Tests for subtree size accumulation."""

from __future__ import annotations

import os

from folderspace.core.accumulator import measure
from folderspace.core.cancel import CancellationToken
from folderspace.models.scan_result import Failed, Measured, ScanTarget
from tests.fakes import BAD_STAT, Denied, FakeFileSystem, Link, Vanishing


class TestMeasure:
    def test_flat_directory(self):
        fs = FakeFileSystem({"a": {"x": 100, "y": 50}})
        assert measure(ScanTarget(fs.path("a")), fs=fs) == Measured(size_bytes=150, file_count=2)

    def test_nested_directories_sum_once(self):
        fs = FakeFileSystem({
            "a": {
                "f": 1,
                "b": {"g": 10, "c": {"h": 100}},
                "d": {"i": 1000},
            }
        })
        assert measure(ScanTarget(fs.path("a")), fs=fs) == Measured(size_bytes=1111, file_count=4)

    def test_empty_directory(self):
        fs = FakeFileSystem({"a": {}})
        assert measure(ScanTarget(fs.path("a")), fs=fs) == Measured(size_bytes=0, file_count=0)

    def test_denied_subdirectory_fails_whole_subtree(self):
        fs = FakeFileSystem({"a": {"big": 10_000, "inner": {"locked": Denied({"x": 1})}}})
        result = measure(ScanTarget(fs.path("a")), fs=fs)
        assert isinstance(result, Failed)

    def test_vanishing_subdirectory_fails_whole_subtree(self):
        fs = FakeFileSystem({"a": {"f": 5, "tmp": Vanishing()}})
        assert isinstance(measure(ScanTarget(fs.path("a")), fs=fs), Failed)

    def test_unlistable_target_fails(self):
        fs = FakeFileSystem({"a": Denied()})
        assert isinstance(measure(ScanTarget(fs.path("a")), fs=fs), Failed)

    def test_file_stat_error_counts_as_zero(self):
        fs = FakeFileSystem({"a": {"ok": 70, "broken": BAD_STAT}})
        result = measure(ScanTarget(fs.path("a")), fs=fs)
        assert isinstance(result, Measured)
        assert result.size_bytes == 70

    def test_symlink_counts_own_size_and_is_not_followed(self):
        fs = FakeFileSystem({"a": {"link": Link(size=12), "f": 3}, "elsewhere": {"huge": 10**9}})
        assert measure(ScanTarget(fs.path("a")), fs=fs) == Measured(size_bytes=15, file_count=2)
        assert fs.path("elsewhere") not in fs.listed

    def test_deep_tree_does_not_hit_recursion_limit(self):
        depth = 3000
        tree: dict = {"leaf": 1}
        for _ in range(depth):
            tree = {"d": tree}
        fs = FakeFileSystem({"a": tree})
        assert measure(ScanTarget(fs.path("a")), fs=fs) == Measured(size_bytes=1, file_count=1)


class TestMeasureCancellation:
    def test_cancelled_before_start(self):
        fs = FakeFileSystem({"a": {"f": 1}})
        token = CancellationToken()
        token.cancel()
        assert isinstance(measure(ScanTarget(fs.path("a")), token, fs), Failed)
        assert fs.listed == []

    def test_cancel_midway_reports_failure_and_stops_listing(self):
        fs = FakeFileSystem({"a": {"b": {"c": {"d": {"f": 1}}}}})
        token = CancellationToken()

        def cancel_at_c(path):
            if path == fs.path("a", "b", "c"):
                token.cancel()

        fs.on_list = cancel_at_c
        result = measure(ScanTarget(fs.path("a")), token, fs)

        assert isinstance(result, Failed)
        assert fs.path("a", "b", "c", "d") not in fs.listed


class TestMeasureLocal:
    def test_real_tree(self, make_tree):
        root = make_tree({"a": {"x": 100, "sub": {"y": 50, "deeper": {"z": 7}}}})
        assert measure(ScanTarget(root / "a")) == Measured(size_bytes=157, file_count=3)

    def test_real_symlink_loop_is_safe(self, make_tree):
        root = make_tree({"a": {"f": 10}})
        os.symlink(root / "a", root / "a" / "loop")
        result = measure(ScanTarget(root / "a"))
        assert isinstance(result, Measured)
        assert result.file_count == 2
        assert result.size_bytes == 10 + os.lstat(root / "a" / "loop").st_size

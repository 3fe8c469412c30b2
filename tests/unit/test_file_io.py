"""Unit tests for core.file_io: locked JSONL append and read."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from sc_events.core.file_io import iter_lines, safe_append_line


class TestSafeAppendLine:
    def test_appends_multiple_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "test.jsonl"
        for n in (1, 2, 3):
            safe_append_line(path, json.dumps({"n": n}))

        lines = path.read_text().strip().split("\n")
        assert [json.loads(line) for line in lines] == [{"n": 1}, {"n": 2}, {"n": 3}]

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "test.jsonl"
        safe_append_line(path, '{"nested": true}')
        assert json.loads(path.read_text().strip()) == {"nested": True}

    def test_rejects_embedded_newline(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            safe_append_line(tmp_path / "x.jsonl", "a\nb")

    def test_concurrent_writes_no_corruption(self, tmp_path: Path) -> None:
        path = tmp_path / "concurrent.jsonl"

        def writer(thread_id: int) -> None:
            for i in range(10):
                safe_append_line(path, json.dumps({"thread": thread_id, "seq": i}))

        threads = [threading.Thread(target=writer, args=(tid,)) for tid in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = path.read_text().strip().split("\n")
        assert len(lines) == 200
        for line in lines:
            json.loads(line)


class TestIterLines:
    def test_skips_blank_lines_and_numbers_from_one(self, tmp_path: Path) -> None:
        path = tmp_path / "x.jsonl"
        path.write_text("a\n\n  \nb\n")
        assert list(iter_lines(path)) == [(1, b"a"), (4, b"b")]

    def test_yields_undecoded_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "x.jsonl"
        path.write_bytes(b"ok\n\xff\xfe torn\n")
        assert list(iter_lines(path)) == [(1, b"ok"), (2, b"\xff\xfe torn")]

    def test_missing_file(self, tmp_path: Path) -> None:
        assert list(iter_lines(tmp_path / "absent.jsonl")) == []

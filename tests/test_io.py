from __future__ import annotations

from pathlib import Path

import pytest

from kb_assistant.io import read_json, read_urls_from_file, write_json


def test_reads_crlf_and_lf_lines(tmp_path: Path):
    path = tmp_path / "urls.txt"
    path.write_bytes(b"https://example.com/a\r\nhttps://example.com/b\n  https://example.com/c  \r\n\r\n")

    assert read_urls_from_file(path) == [
        "https://example.com/a",
        "https://example.com/b",
        "https://example.com/c",
    ]


def test_duplicates_and_hash_lines_are_kept(tmp_path: Path):
    path = tmp_path / "urls.txt"
    path.write_text("https://example.com/a\nhttps://example.com/a\n#https://example.com/b\n", encoding="utf-8")

    assert read_urls_from_file(path) == [
        "https://example.com/a",
        "https://example.com/a",
        "#https://example.com/b",
    ]


def test_missing_urls_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_urls_from_file(tmp_path / "nope.txt")


def test_write_json_creates_parent_and_overwrites(tmp_path: Path):
    path = tmp_path / "nested" / "doc.json"

    write_json(path, [1, 2])
    write_json(path, {"ü": "ok"})

    assert read_json(path) == {"ü": "ok"}

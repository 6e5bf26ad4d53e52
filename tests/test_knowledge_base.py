from __future__ import annotations

import json
import logging

import httpx
import pytest

from kb_assistant.cache import DocumentCache
from kb_assistant.chunking import TextChunker
from kb_assistant.index import VectorIndex
from kb_assistant.knowledge_base import KnowledgeBase
from kb_assistant.models import Chunk

from fakes import PAGE_TEXT, PAGE_URL, FakeEmbedder, FakePageFetcher


def _kb(data_dir, fetcher, chunk_size: int = 500) -> KnowledgeBase:
    return KnowledgeBase(
        cache=DocumentCache(data_dir),
        fetcher=fetcher,
        chunker=TextChunker(chunk_size=chunk_size),
        index=VectorIndex(FakeEmbedder()),
    )


def test_uncached_page_is_fetched_chunked_cached_and_indexed(knowledge_base, fetcher, settings):
    summary = knowledge_base.build([PAGE_URL])

    assert fetcher.calls == [PAGE_URL]
    cache_file = settings.data_dir / "page.json"
    assert json.loads(cache_file.read_text(encoding="utf-8")) == [
        {"text": PAGE_TEXT, "metadata": {"source": PAGE_URL, "chunk_index": 0}}
    ]
    assert len(knowledge_base.index) == 1
    assert knowledge_base.index.chunks()[0].text == PAGE_TEXT
    assert summary == {
        "total_urls": 1,
        "from_cache": 0,
        "fetched": 1,
        "chunks_indexed": 1,
        "data_dir": str(settings.data_dir),
    }


def test_cached_page_is_not_fetched(knowledge_base, fetcher, settings):
    cached = [Chunk(text="Cached text.", metadata={"source": PAGE_URL, "chunk_index": 0})]
    DocumentCache(settings.data_dir).save(PAGE_URL, cached)

    step = knowledge_base.add_web_document(PAGE_URL)

    assert fetcher.calls == []
    assert step.from_cache is True
    assert knowledge_base.index.chunks() == cached


def test_rerun_reads_cache_instead_of_fetching(tmp_path):
    fetcher = FakePageFetcher({PAGE_URL: PAGE_TEXT})

    _kb(tmp_path, fetcher).build([PAGE_URL])
    second = _kb(tmp_path, fetcher)
    summary = second.build([PAGE_URL])

    assert fetcher.calls == [PAGE_URL]
    assert summary["from_cache"] == 1
    assert second.index.chunks()[0].text == PAGE_TEXT


def test_identical_cache_gives_identical_index(tmp_path):
    text = "\n\n".join(f"Paragraph {i}. " + "filler words " * 30 for i in range(6))
    fetcher = FakePageFetcher({PAGE_URL: text})
    _kb(tmp_path, fetcher).build([PAGE_URL])

    first = _kb(tmp_path, fetcher)
    second = _kb(tmp_path, fetcher)
    first.build([PAGE_URL])
    second.build([PAGE_URL])

    assert first.index.entries() == second.index.entries()


def test_cache_file_chunks_reconstruct_long_page(tmp_path):
    text = "\n\n".join(
        "Section {0}. ".format(i) + " ".join(f"token{i}x{j}" for j in range(120))
        for i in range(5)
    )
    kb = _kb(tmp_path, FakePageFetcher({PAGE_URL: text}), chunk_size=500)

    kb.build([PAGE_URL])

    stored = json.loads((tmp_path / "page.json").read_text(encoding="utf-8"))
    pieces = [c["text"] for c in stored]
    assert len(pieces) > 1
    assert all(len(p) <= 500 for p in pieces)
    assert "".join("".join(pieces).split()) == "".join(text.split())
    assert [c["metadata"]["chunk_index"] for c in stored] == list(range(len(pieces)))


def test_fetch_error_aborts_build(tmp_path):
    error = httpx.ConnectError("network down")
    fetcher = FakePageFetcher({PAGE_URL: error, "https://example.com/next": "never reached"})
    kb = _kb(tmp_path, fetcher)

    with pytest.raises(httpx.ConnectError):
        kb.build([PAGE_URL, "https://example.com/next"])

    assert fetcher.calls == [PAGE_URL]
    assert len(kb.index) == 0
    assert not (tmp_path / "page.json").exists()


def test_urls_are_processed_in_order(tmp_path):
    fetcher = FakePageFetcher({
        "https://example.com/a": "Page A text.",
        "https://example.com/b": "Page B text.",
    })
    kb = _kb(tmp_path, fetcher)

    kb.build(["https://example.com/a", "https://example.com/b"])

    assert fetcher.calls == ["https://example.com/a", "https://example.com/b"]
    assert [c.text for c in kb.index.chunks()] == ["Page A text.", "Page B text."]


def test_empty_page_is_cached_with_no_chunks(tmp_path):
    fetcher = FakePageFetcher({PAGE_URL: ""})
    kb = _kb(tmp_path, fetcher)

    step = kb.add_web_document(PAGE_URL)

    assert step.chunks == 0
    assert json.loads((tmp_path / "page.json").read_text(encoding="utf-8")) == []


def test_cache_key_collision_is_logged(tmp_path, caplog):
    fetcher = FakePageFetcher({
        "https://one.example.com/index": "First site.",
        "https://two.example.com/index": "Second site.",
    })
    kb = _kb(tmp_path, fetcher)

    with caplog.at_level(logging.WARNING, logger="kb_assistant.knowledge_base"):
        kb.build(["https://one.example.com/index", "https://two.example.com/index"])

    assert "Cache key collision" in caplog.text
    # second URL is served from the first URL's cache file
    assert fetcher.calls == ["https://one.example.com/index"]
    assert [c.text for c in kb.index.chunks()] == ["First site.", "First site."]

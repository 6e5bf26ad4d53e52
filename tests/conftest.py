from __future__ import annotations

from pathlib import Path

import pytest

from kb_assistant.cache import DocumentCache
from kb_assistant.chunking import TextChunker
from kb_assistant.config import Settings
from kb_assistant.index import VectorIndex
from kb_assistant.knowledge_base import KnowledgeBase
from kb_assistant.responder import Responder

from fakes import PAGE_TEXT, PAGE_URL, FakeCompleter, FakeEmbedder, FakePageFetcher


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="sk-test-0000000000",
        data_dir=tmp_path / "data",
        urls_file=tmp_path / "urls.txt",
    )


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def completer() -> FakeCompleter:
    return FakeCompleter()


@pytest.fixture
def fetcher() -> FakePageFetcher:
    return FakePageFetcher({PAGE_URL: PAGE_TEXT})


@pytest.fixture
def knowledge_base(settings: Settings, embedder: FakeEmbedder, fetcher: FakePageFetcher) -> KnowledgeBase:
    return KnowledgeBase(
        cache=DocumentCache(settings.data_dir),
        fetcher=fetcher,
        chunker=TextChunker(chunk_size=settings.chunk_size, chunk_overlap=settings.chunk_overlap),
        index=VectorIndex(embedder),
    )


@pytest.fixture
def responder(knowledge_base: KnowledgeBase, completer: FakeCompleter) -> Responder:
    return Responder(knowledge_base.index, completer, top_k=4)

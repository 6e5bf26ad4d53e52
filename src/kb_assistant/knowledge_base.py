from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Sequence

from kb_assistant.cache import DocumentCache
from kb_assistant.chunking import TextChunker
from kb_assistant.index import VectorIndex
from kb_assistant.interfaces import PageFetcher
from kb_assistant.loader import load_document

log = logging.getLogger("kb_assistant.knowledge_base")


@dataclass(frozen=True)
class BuildStep:
    url: str
    from_cache: bool
    chunks: int
    cache_file: Path


class KnowledgeBase:
    """
    Builds the in-memory index from a URL list: cached chunks when present,
    otherwise fetch -> chunk -> cache write. Every chunk ends up in the index.
    """

    def __init__(
        self,
        cache: DocumentCache,
        fetcher: PageFetcher,
        chunker: TextChunker,
        index: VectorIndex,
    ) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self.chunker = chunker
        self.index = index
        # cache file -> first URL that used it during this run
        self._cache_owners: Dict[Path, str] = {}

    def _note_cache_owner(self, url: str, path: Path) -> None:
        owner = self._cache_owners.setdefault(path, url)
        if owner != url:
            log.warning("Cache key collision: %s and %s both map to %s", owner, url, path)

    def add_web_document(self, url: str) -> BuildStep:
        log.info("Adding document from %s", url)
        path = self.cache.cache_path(url)
        self._note_cache_owner(url, path)

        chunks = self.cache.load(url)
        if chunks is not None:
            log.info("Document already cached, skipping fetch: %s", path)
            self.index.add(chunks)
            return BuildStep(url=url, from_cache=True, chunks=len(chunks), cache_file=path)

        documents = load_document(self.fetcher, url)
        chunks = self.chunker.split_documents(documents)
        self.cache.save(url, chunks)
        self.index.add(chunks)

        log.info("Indexed %d chunks from %s", len(chunks), url)
        return BuildStep(url=url, from_cache=False, chunks=len(chunks), cache_file=path)

    def build(self, urls: Sequence[str]) -> dict:
        """
        Index every URL in order. The first failure propagates and stops the pass.
        """
        from_cache = 0
        fetched = 0
        chunks = 0

        total = len(urls)
        for idx, url in enumerate(urls, start=1):
            log.info("(%d/%d) Processing %s", idx, total, url)
            step = self.add_web_document(url)
            chunks += step.chunks
            if step.from_cache:
                from_cache += 1
            else:
                fetched += 1

        summary = {
            "total_urls": total,
            "from_cache": from_cache,
            "fetched": fetched,
            "chunks_indexed": chunks,
            "data_dir": str(self.cache.data_dir),
        }
        log.info("Indexing finished: %s", summary)
        return summary

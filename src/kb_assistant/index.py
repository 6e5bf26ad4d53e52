from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from kb_assistant.interfaces import Embedder
from kb_assistant.models import Chunk, IndexEntry, SearchHit
from kb_assistant.vectorstore_chroma import ChromaVectorStore

log = logging.getLogger("kb_assistant.index")


class VectorIndex:
    """
    In-memory, append-only index of chunk embeddings.

    No deduplication: adding the same chunk twice stores (and can retrieve) it twice.
    Ids are insertion counters, so the same chunks added in the same order
    always produce the same entries.
    """

    def __init__(self, embedder: Embedder, store: Optional[ChromaVectorStore] = None) -> None:
        self._embedder = embedder
        self._store = store or ChromaVectorStore()
        self._chunks: Dict[str, Chunk] = {}

    def __len__(self) -> int:
        return len(self._chunks)

    def add(self, chunks: Sequence[Chunk]) -> None:
        if not chunks:
            return

        texts = [c.text for c in chunks]
        vectors = self._embedder.embed_texts(texts)

        start = len(self._chunks)
        ids: List[str] = [f"{start + i:08d}" for i in range(len(chunks))]

        self._store.add(
            ids=ids,
            texts=texts,
            embeddings=vectors,
            metadatas=[c.metadata for c in chunks],
        )
        self._chunks.update(zip(ids, chunks))
        log.debug("Indexed %d chunks (total=%d)", len(chunks), len(self._chunks))

    def search(self, query: str, k: int = 4) -> List[SearchHit]:
        """
        Top-k chunks by cosine similarity to the query, most similar first.
        """
        if k <= 0 or not self._chunks:
            return []

        query_vec = self._embedder.embed_text(query)
        hits = self._store.query(query_vec, n_results=k)

        return [
            SearchHit(rank=rank, score=1.0 - h["distance"], chunk=self._chunks[h["id"]])
            for rank, h in enumerate(hits, start=1)
        ]

    def retrieve(self, query: str, k: int = 4) -> List[Chunk]:
        return [hit.chunk for hit in self.search(query, k)]

    def chunks(self) -> List[Chunk]:
        return list(self._chunks.values())

    def entries(self) -> List[IndexEntry]:
        ids = list(self._chunks)
        vectors = self._store.get_embeddings(ids)
        return [IndexEntry(id=i, chunk=self._chunks[i], embedding=vectors[i]) for i in ids]

    def close(self) -> None:
        self._store.delete()

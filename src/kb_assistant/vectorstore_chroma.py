from __future__ import annotations

import json
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

import chromadb
from chromadb.config import Settings as ChromaSettings

_SCALARS = (str, int, float, bool)


def to_chroma_metadata(metadata: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Chroma metadata must be scalar values only (no lists/dicts/None).
    Nested values are stored as JSON strings, None values are dropped.
    """
    out: Dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, _SCALARS):
            out[str(key)] = value
        else:
            out[str(key)] = json.dumps(value, ensure_ascii=False, sort_keys=True)
    return out or None


def _ephemeral_client() -> chromadb.ClientAPI:
    # Every EphemeralClient in a process shares one backend, so settings must stay identical
    return chromadb.EphemeralClient(settings=ChromaSettings(anonymized_telemetry=False))


class ChromaVectorStore:
    """
    Process-lifetime Chroma collection using cosine distance.

    Embeddings are always computed by the caller; the collection has no embedding function.
    Each instance owns a uniquely named collection so several stores never see each other.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name or f"kb-{uuid.uuid4().hex}"
        self._client = _ephemeral_client()
        self._collection = self._client.create_collection(
            name=self.name,
            metadata={"hnsw:space": "cosine"},
            embedding_function=None,
        )

    def count(self) -> int:
        return self._collection.count()

    def delete(self) -> None:
        """Drop the collection from the shared in-memory backend."""
        self._client.delete_collection(self.name)

    def add(
        self,
        ids: Sequence[str],
        texts: Sequence[str],
        embeddings: Sequence[Sequence[float]],
        metadatas: Sequence[Mapping[str, Any]],
    ) -> None:
        if not ids:
            return

        self._collection.add(
            ids=list(ids),
            documents=list(texts),
            embeddings=[[float(x) for x in e] for e in embeddings],
            metadatas=[to_chroma_metadata(m) for m in metadatas],
        )

    def query(self, embedding: Sequence[float], n_results: int) -> List[Dict[str, Any]]:
        """
        Nearest neighbours of one embedding, closest first: [{"id", "distance"}].
        """
        n = min(int(n_results), self.count())
        if n <= 0:
            return []

        results = self._collection.query(
            query_embeddings=[[float(x) for x in embedding]],
            n_results=n,
            include=["distances"],
        )

        hits: List[Dict[str, Any]] = []
        for i in range(len(results["ids"][0])):
            hits.append({"id": results["ids"][0][i], "distance": float(results["distances"][0][i])})
        return hits

    def get_embeddings(self, ids: Sequence[str]) -> Dict[str, List[float]]:
        if not ids:
            return {}

        results = self._collection.get(ids=list(ids), include=["embeddings"])
        return {
            id_: [float(x) for x in emb]
            for id_, emb in zip(results["ids"], results["embeddings"])
        }

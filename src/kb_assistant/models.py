from __future__ import annotations

from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PageDocument(BaseModel):
    """
    Text extracted from one web page, before chunking.
    """

    text: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Chunk(BaseModel):
    """
    Bounded-size piece of a document plus metadata; the unit of retrieval.

    Cache files written by the older JavaScript tool use ``pageContent``
    instead of ``text``; both are accepted on load, ``text`` is always written.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(..., validation_alias=AliasChoices("text", "pageContent"))
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def source(self) -> str:
        return str(self.metadata.get("source") or "")


class IndexEntry(BaseModel):
    """
    One chunk held by the in-memory vector index.
    """

    id: str
    chunk: Chunk
    embedding: List[float]


class SearchHit(BaseModel):
    rank: int
    score: float = Field(..., description="Cosine similarity to the query")
    chunk: Chunk


class Answer(BaseModel):
    text: str
    sources: List[str] = Field(default_factory=list)

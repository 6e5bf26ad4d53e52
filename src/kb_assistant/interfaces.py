"""
Narrow capability interfaces for the external services the assistant talks to.

The default implementations live in ``embeddings_client``, ``llm_client`` and
``loader``; tests substitute deterministic fakes.
"""
from __future__ import annotations

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class Embedder(Protocol):
    def embed_text(self, text: str) -> List[float]: ...

    def embed_texts(self, texts: List[str]) -> List[List[float]]: ...


@runtime_checkable
class Completer(Protocol):
    def complete(self, prompt: str) -> str: ...


@runtime_checkable
class PageFetcher(Protocol):
    def fetch_page(self, url: str) -> str: ...

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from kb_assistant.cache import DocumentCache
from kb_assistant.chunking import TextChunker
from kb_assistant.config import Settings
from kb_assistant.embeddings_client import EmbeddingsClient
from kb_assistant.http_client import HttpFetcher
from kb_assistant.index import VectorIndex
from kb_assistant.interfaces import Completer, Embedder, PageFetcher
from kb_assistant.knowledge_base import KnowledgeBase
from kb_assistant.llm_client import LLMClient
from kb_assistant.loader import WebLoader
from kb_assistant.responder import Responder


@dataclass
class AppContext:
    """
    Everything one run owns: settings, the chunk cache, the in-memory index
    and the components built around them.
    """

    settings: Settings
    knowledge_base: KnowledgeBase
    responder: Responder
    _closers: List[Callable[[], None]] = field(default_factory=list, repr=False)

    @property
    def index(self) -> VectorIndex:
        return self.knowledge_base.index

    def close(self) -> None:
        for close in self._closers:
            close()


def build_context(
    settings: Settings,
    *,
    embedder: Optional[Embedder] = None,
    completer: Optional[Completer] = None,
    fetcher: Optional[PageFetcher] = None,
) -> AppContext:
    """
    Wire the default OpenAI/HTTP implementations, or the substitutes given.
    """
    closers: List[Callable[[], None]] = []

    if embedder is None:
        embedder = EmbeddingsClient(api_key=settings.openai_api_key, model=settings.openai_embedding_model)
    if completer is None:
        completer = LLMClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
        )
    if fetcher is None:
        loader = WebLoader(HttpFetcher(timeout_s=settings.http_timeout_s, follow_redirects=True))
        closers.append(loader.close)
        fetcher = loader

    index = VectorIndex(embedder)
    closers.append(index.close)
    knowledge_base = KnowledgeBase(
        cache=DocumentCache(settings.data_dir),
        fetcher=fetcher,
        chunker=TextChunker(chunk_size=settings.chunk_size, chunk_overlap=settings.chunk_overlap),
        index=index,
    )
    responder = Responder(index, completer, top_k=settings.top_k)

    return AppContext(settings=settings, knowledge_base=knowledge_base, responder=responder, _closers=closers)

from __future__ import annotations

import logging
from typing import List

from kb_assistant.index import VectorIndex
from kb_assistant.interfaces import Completer
from kb_assistant.models import Answer, Chunk
from kb_assistant.prompts import build_qa_prompt

log = logging.getLogger("kb_assistant.responder")


def _distinct_sources(chunks: List[Chunk]) -> List[str]:
    sources: List[str] = []
    for c in chunks:
        if c.source and c.source not in sources:
            sources.append(c.source)
    return sources


class Responder:
    """
    Retrieval-augmented answering: top-k chunks as context, then one completion call.
    Every query is answered, blank ones included. Retrieval and completion
    errors propagate to the caller.
    """

    def __init__(self, index: VectorIndex, completer: Completer, top_k: int = 4) -> None:
        self.index = index
        self.completer = completer
        self.top_k = top_k

    def answer(self, query: str) -> Answer:
        # blank input cannot be embedded; it still goes to the model, with no context
        chunks = self.index.retrieve(query, self.top_k) if query.strip() else []
        log.debug("Retrieved %d chunks for query %r", len(chunks), query)

        prompt = build_qa_prompt(query, chunks)
        text = self.completer.complete(prompt)

        return Answer(text=text, sources=_distinct_sources(chunks))

from __future__ import annotations

import logging
from typing import List

import openai
from openai import OpenAI
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

log = logging.getLogger("kb_assistant.embeddings")

# Errors worth another attempt; anything else (bad key, bad request) fails at once
TRANSIENT_OPENAI_ERRORS = (
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class EmbeddingsClient:
    """
    Thin, retry-safe wrapper for generating embeddings.
    """

    def __init__(self, api_key: str, model: str = "text-embedding-3-small", batch_size: int = 128) -> None:
        self._client = OpenAI(api_key=api_key)
        self._model = model
        self._batch_size = batch_size

    @retry(
        retry=retry_if_exception_type(TRANSIENT_OPENAI_ERRORS),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    def _embed_batch(self, texts: List[str]) -> List[List[float]]:
        log.debug("Embedding batch of %d texts (%d chars)", len(texts), sum(len(t) for t in texts))

        resp = self._client.embeddings.create(
            model=self._model,
            input=texts,
        )

        try:
            ordered = sorted(resp.data, key=lambda d: d.index)
            vectors = [d.embedding for d in ordered]
        except Exception as e:
            raise RuntimeError("Invalid embedding response") from e

        if len(vectors) != len(texts):
            raise RuntimeError(f"Expected {len(texts)} embeddings, got {len(vectors)}")
        return vectors

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        """
        Generate one embedding vector per text, batching requests.
        """
        for t in texts:
            if not t or not t.strip():
                raise ValueError("Cannot embed empty text")

        vectors: List[List[float]] = []
        for start in range(0, len(texts), self._batch_size):
            vectors.extend(self._embed_batch(texts[start : start + self._batch_size]))
        return vectors

    def embed_text(self, text: str) -> List[float]:
        """
        Generate a single embedding vector for the given text.
        """
        return self.embed_texts([text])[0]

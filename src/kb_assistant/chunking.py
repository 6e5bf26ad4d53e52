from __future__ import annotations

from typing import List, Sequence

from langchain_text_splitters import RecursiveCharacterTextSplitter

from kb_assistant.models import Chunk, PageDocument

# Paragraph, line, sentence, word, then a hard cut between characters
DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


class TextChunker:
    """
    Greedy recursive splitter: pieces of at most ``chunk_size`` characters,
    breaking on the largest boundary that fits.

    Separators stay attached to the end of the piece they terminate, then
    surrounding whitespace is stripped. With zero overlap the chunks of a
    document concatenate back to its text up to whitespace.
    """

    def __init__(self, chunk_size: int = 500, chunk_overlap: int = 0) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError("chunk_overlap must be in [0, chunk_size)")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=DEFAULT_SEPARATORS,
            keep_separator="end",
            strip_whitespace=True,
        )

    def split_text(self, text: str) -> List[str]:
        return [piece for piece in self._splitter.split_text(text or "") if piece.strip()]

    def split_documents(self, documents: Sequence[PageDocument]) -> List[Chunk]:
        chunks: List[Chunk] = []
        for doc in documents:
            for i, piece in enumerate(self.split_text(doc.text)):
                chunks.append(Chunk(text=piece, metadata={**doc.metadata, "chunk_index": i}))
        return chunks

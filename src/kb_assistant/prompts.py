from __future__ import annotations

from typing import Sequence

from kb_assistant.models import Chunk


SYSTEM_PROMPT = """You are a helpful assistant answering questions about a fixed set of web pages.
Answer only from the provided context.
"""


def build_context(chunks: Sequence[Chunk]) -> str:
    return "\n\n".join(c.text for c in chunks)


def build_qa_prompt(query: str, chunks: Sequence[Chunk]) -> str:
    """
    Build the question-answering prompt: retrieved chunk texts as context, then the question.
    """
    return f"""
Use the following pieces of context to answer the question at the end. If you don't know the answer, just say that you don't know, don't try to make up an answer.

{build_context(chunks)}

Question: {query}
Helpful Answer:""".strip()

from __future__ import annotations

import enum
import logging
from typing import Callable, Optional, Sequence

import typer

from kb_assistant.knowledge_base import KnowledgeBase
from kb_assistant.responder import Responder

log = logging.getLogger("kb_assistant.repl")

PROMPT = "Enter your query: "
EXIT_COMMAND = "exit"


class SessionState(str, enum.Enum):
    INDEXING = "indexing"
    READY = "ready"
    ANSWERING = "answering"
    CLOSED = "closed"


def is_exit_command(line: str) -> bool:
    """Exact, case-insensitive match on the sentinel word."""
    return line.lower() == EXIT_COMMAND


class InteractiveSession:
    """
    Read-eval loop over the responder, one query at a time.

    INDEXING -> READY -> (ANSWERING -> READY)* -> CLOSED
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        responder: Responder,
        *,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = typer.echo,
    ) -> None:
        self.knowledge_base = knowledge_base
        self.responder = responder
        self._read = read
        self._write = write
        self.state = SessionState.INDEXING
        self.summary: Optional[dict] = None

    def start(self, urls: Sequence[str]) -> dict:
        """
        Build the index. Only a complete pass moves the session to READY.
        """
        self.state = SessionState.INDEXING
        self.summary = self.knowledge_base.build(urls)
        self.state = SessionState.READY
        return self.summary

    def handle(self, query: str) -> str:
        self.state = SessionState.ANSWERING
        try:
            return self.responder.answer(query).text
        except Exception as e:
            log.debug("Query failed: %r", query, exc_info=True)
            return f"Error: {type(e).__name__}: {e}"
        finally:
            self.state = SessionState.READY

    def run(self) -> int:
        if self.state is not SessionState.READY:
            raise RuntimeError(f"Session is not ready (state={self.state.value})")

        while True:
            try:
                line = self._read(PROMPT)
            except EOFError:
                break

            if is_exit_command(line):
                break

            self._write(self.handle(line))

        self.state = SessionState.CLOSED
        return 0

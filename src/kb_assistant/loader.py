from __future__ import annotations

import logging
from typing import List

from kb_assistant.extract import extract_page
from kb_assistant.http_client import HttpFetcher
from kb_assistant.interfaces import PageFetcher
from kb_assistant.models import PageDocument

log = logging.getLogger("kb_assistant.loader")


class WebLoader:
    """
    PageFetcher backed by HTTP + HTML text extraction.
    """

    def __init__(self, fetcher: HttpFetcher) -> None:
        self._fetcher = fetcher

    def close(self) -> None:
        self._fetcher.close()

    def fetch_page(self, url: str) -> str:
        result = self._fetcher.fetch(url)
        page = extract_page(result.html)

        log.info(
            "Fetched %s (status=%s, title=%r, %d chars)",
            result.final_url,
            result.status_code,
            page.title,
            page.chars,
        )
        if not page.text:
            log.warning("No visible text extracted from %s", url)

        return page.text


def load_document(fetcher: PageFetcher, url: str) -> List[PageDocument]:
    """
    Fetch one URL and wrap its text with the source URL as metadata.
    Network and parse errors propagate to the caller.
    """
    text = fetcher.fetch_page(url)
    return [PageDocument(text=text, metadata={"source": url})]

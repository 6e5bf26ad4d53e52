from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import trafilatura
from bs4 import BeautifulSoup

# Elements whose text is never visible page content
_INVISIBLE_TAGS = ("script", "style", "noscript", "template")


@dataclass(frozen=True)
class ExtractedPage:
    title: Optional[str]
    text: str
    chars: int


def _visible_body_text(soup: BeautifulSoup) -> str:
    for tag in soup(_INVISIBLE_TAGS):
        tag.decompose()
    root = soup.body or soup
    return root.get_text(separator="\n", strip=True)


def extract_page(html: str) -> ExtractedPage:
    """
    Extracts title + visible text from HTML.

    Text:
      - every visible string under <body> via BeautifulSoup, navigation,
        sidebars and footers included

    Title:
      - trafilatura.extract_metadata (title, if available)
      - <title> via BeautifulSoup otherwise

    Pages with no text at all yield text="" rather than an error; the chunker
    turns that into zero chunks.
    """
    title: Optional[str] = None
    meta = trafilatura.extract_metadata(html)
    if meta and getattr(meta, "title", None):
        title = meta.title

    soup = BeautifulSoup(html, "lxml")
    if not title and soup.title and soup.title.string:
        title = soup.title.string.strip()

    text = _visible_body_text(soup)

    return ExtractedPage(title=title, text=text, chars=len(text))

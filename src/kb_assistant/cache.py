from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from kb_assistant.io import read_json, write_json
from kb_assistant.models import Chunk

log = logging.getLogger("kb_assistant.cache")


def cache_key(url: str) -> str:
    """
    Last '/'-separated segment of the URL.

    URLs sharing a final segment share a cache file; a trailing slash yields an empty key.
    """
    return url.split("/")[-1]


class DocumentCache:
    """
    Flat-file store of chunked pages, one JSON file per URL.

    A file's existence is the only "already indexed" signal; entries never expire.
    """

    def __init__(self, data_dir: Path, extension: str = ".json") -> None:
        self.data_dir = Path(data_dir)
        self.extension = extension

    def cache_path(self, url: str) -> Path:
        return self.data_dir / f"{cache_key(url)}{self.extension}"

    def load(self, url: str) -> Optional[List[Chunk]]:
        path = self.cache_path(url)
        if not path.exists():
            return None

        data = read_json(path)
        if not isinstance(data, list):
            raise ValueError(f"Cache file is not a JSON array of chunks: {path}")

        chunks = [Chunk.model_validate(obj) for obj in data]
        log.debug("Loaded %d cached chunks from %s", len(chunks), path)
        return chunks

    def save(self, url: str, chunks: Sequence[Chunk]) -> Path:
        path = self.cache_path(url)
        write_json(path, [c.model_dump(mode="json") for c in chunks])
        log.debug("Saved %d chunks to %s", len(chunks), path)
        return path

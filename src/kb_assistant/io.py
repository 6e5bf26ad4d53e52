from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List


def read_urls_from_file(path: Path) -> List[str]:
    """
    Read URLs from a text file:
    - one URL per line (LF or CRLF)
    - surrounding whitespace is stripped, empty lines are ignored
    - no comment syntax, no deduplication, no URL validation
    """
    if not path.exists():
        raise FileNotFoundError(f"URLs file not found: {path}")

    urls: List[str] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line:
            urls.append(line)

    return urls


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, obj: Any) -> None:
    """
    Write one JSON document, replacing the file if it exists.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False)
        f.flush()

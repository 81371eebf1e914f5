# bundler/adapters/documents/json_documents.py
"""
Deterministic JSON reading and writing shared by the translation
aggregator and the manifest stamper.

Output is always 2-space indented, UTF-8, LF line endings and a trailing
newline so repeated builds are diff-stable.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from bundler.core.domain.exceptions import MalformedDocumentError, SourceMissingError

INDENT = 2


def load_document(path: Path) -> Any:
    """Parse a JSON file, mapping failures onto the build error taxonomy."""
    path = Path(path)
    if not path.is_file():
        raise SourceMissingError(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(path, f"line {e.lineno} column {e.colno}: {e.msg}") from e
    except UnicodeDecodeError as e:
        raise MalformedDocumentError(path, f"not valid UTF-8 ({e.reason})") from e


def dump_document(data: Any) -> str:
    return json.dumps(data, indent=INDENT, ensure_ascii=False) + "\n"


def write_document(path: Path, data: Any) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(dump_document(data))
    return path

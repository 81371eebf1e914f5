# bundler/adapters/documents/translations.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import structlog

from bundler.adapters.documents.json_documents import load_document, write_document
from bundler.core.domain.exceptions import SourceMissingError

logger = structlog.get_logger()

TRANSLATION_PATTERN = "*.json"


def collect_translations(src_dir: Path) -> Dict[str, Any]:
    """
    Reads every `<lang>.json` directly inside `src_dir` into one table keyed
    by language code. Files are visited in sorted order so the table (and the
    document written from it) is identical across machines.
    """
    src_dir = Path(src_dir)
    if not src_dir.is_dir():
        raise SourceMissingError(src_dir, "Translations directory")

    table: Dict[str, Any] = {}
    for path in sorted(src_dir.glob(TRANSLATION_PATTERN)):
        # Hidden files (editor backups, ".en.json") are not language units
        if path.name.startswith(".") or not path.is_file():
            continue
        table[path.stem] = load_document(path)
    return table


def aggregate_translations(src_dir: Path, dst_file: Path) -> Dict[str, Any]:
    """
    Merges the per-language documents of `src_dir` into `dst_file`.

    The table is fully parsed before anything is written: one malformed
    unit aborts the aggregation without leaving a partial output.
    """
    table = collect_translations(src_dir)
    write_document(dst_file, table)
    logger.info("translations_aggregated", languages=sorted(table), output=str(dst_file))
    return table

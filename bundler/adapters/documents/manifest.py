# bundler/adapters/documents/manifest.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import structlog

from bundler.adapters.documents.json_documents import load_document, write_document
from bundler.core.domain.exceptions import MalformedDocumentError

logger = structlog.get_logger()

VERSION_FIELD = "version"


def read_project_version(project_file: Path) -> str:
    """Returns the declared version from the project metadata (package.json)."""
    metadata = load_document(project_file)
    if not isinstance(metadata, dict):
        raise MalformedDocumentError(project_file, "expected a JSON object")

    version = metadata.get(VERSION_FIELD)
    if not isinstance(version, str) or not version:
        raise MalformedDocumentError(project_file, f"missing string '{VERSION_FIELD}' field")
    return version


def stamp_manifest(template: Path, version: str, dst_file: Path) -> Dict[str, Any]:
    """
    Copies the manifest template to `dst_file` with its version overwritten.

    Dict insertion order is preserved by both the parser and the writer, so an
    existing `version` key stays where it was and a missing one is appended.
    """
    manifest = load_document(template)
    if not isinstance(manifest, dict):
        raise MalformedDocumentError(template, "expected a JSON object")

    manifest[VERSION_FIELD] = version
    write_document(dst_file, manifest)
    logger.info("manifest_stamped", version=version, output=str(dst_file))
    return manifest

# bundler/adapters/filesystem/staging.py
"""Filesystem primitives for the pipeline stages: reset, copy, cleanup, vendoring."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, List, Sequence

import structlog

from bundler.core.domain.exceptions import (
    DestinationExistsError,
    SourceMissingError,
    VendoredArtifactMissingError,
)
from bundler.core.domain.models import VendoredArtifact

logger = structlog.get_logger()


def reset_directory(build_dir: Path, *subdirs: str) -> Path:
    """Deletes `build_dir` if present and recreates it (plus `subdirs`) empty."""
    build_dir = Path(build_dir)
    if build_dir.exists():
        shutil.rmtree(build_dir)
    build_dir.mkdir(parents=True)
    for name in subdirs:
        (build_dir / name).mkdir(parents=True, exist_ok=True)
    logger.info("build_dir_reset", path=str(build_dir))
    return build_dir


def copy_files(files: Iterable[Path], dst_dir: Path) -> List[Path]:
    """Copies each file verbatim into `dst_dir`, keeping its name."""
    copied = []
    for src in files:
        src = Path(src)
        if not src.is_file():
            raise SourceMissingError(src)
        dst = Path(dst_dir) / src.name
        shutil.copyfile(src, dst)
        copied.append(dst)
    return copied


def _copy_no_clobber(src, dst):
    if os.path.lexists(dst):
        raise DestinationExistsError(dst)
    return shutil.copy2(src, dst)


def copy_tree_strict(src_dir: Path, dst_dir: Path) -> Path:
    """
    Merges the tree at `src_dir` into `dst_dir`. Existing directories are
    reused, but an existing file at any destination path aborts the copy.
    """
    src_dir = Path(src_dir)
    if not src_dir.is_dir():
        raise SourceMissingError(src_dir, "Static asset directory")
    # DestinationExistsError is not an OSError, so copytree lets it through
    # instead of collecting it into shutil.Error.
    shutil.copytree(src_dir, dst_dir, dirs_exist_ok=True, copy_function=_copy_no_clobber)
    logger.info("static_tree_copied", source=str(src_dir), destination=str(dst_dir))
    return Path(dst_dir)


def remove_files(paths: Iterable[Path]) -> List[Path]:
    """Deletes intermediates; each one is expected to exist."""
    removed = []
    for path in paths:
        path = Path(path)
        if not path.is_file():
            raise SourceMissingError(path, "Intermediate file")
        path.unlink()
        removed.append(path)
    logger.info("intermediates_removed", files=[p.name for p in removed])
    return removed


def vendor_artifacts(
    dependency_dir: Path,
    build_dir: Path,
    artifacts: Sequence[VendoredArtifact],
) -> List[Path]:
    """Copies third-party binaries byte-for-byte from the dependency tree into the build."""
    copied = []
    for artifact in artifacts:
        src = Path(dependency_dir) / artifact.source
        if not src.is_file():
            raise VendoredArtifactMissingError(src)
        dst = Path(build_dir) / artifact.destination
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dst)
        logger.info("artifact_vendored", source=artifact.source, destination=artifact.destination)
        copied.append(dst)
    return copied

# bundler/adapters/archive/tar_builder.py
"""
Reproducible .tar.gz archives of the virtual-filesystem directories.

Two builds from an unchanged directory yield byte-identical archives:
members are added in sorted order, carry no timestamps, owners or
machine-specific paths, and the gzip header has no mtime or file name.
"""

from __future__ import annotations

import gzip
import tarfile
from pathlib import Path
from typing import List

import structlog

from bundler.core.domain.exceptions import SourceMissingError

logger = structlog.get_logger()

DIR_MODE = 0o755
EXEC_MODE = 0o755
FILE_MODE = 0o644


def normalize_member(tarinfo: tarfile.TarInfo) -> tarfile.TarInfo:
    """tarfile filter stripping everything that differs between machines or runs."""
    tarinfo.mtime = 0
    tarinfo.uid = 0
    tarinfo.gid = 0
    tarinfo.uname = ""
    tarinfo.gname = ""
    if tarinfo.isdir():
        tarinfo.mode = DIR_MODE
    elif tarinfo.mode & 0o111:
        tarinfo.mode = EXEC_MODE
    else:
        tarinfo.mode = FILE_MODE
    return tarinfo


def list_entries(src_dir: Path) -> List[str]:
    """Immediate entries of `src_dir`, sorted by name."""
    return sorted(entry.name for entry in Path(src_dir).iterdir())


def build_archive(src_dir: Path, dst_file: Path) -> Path:
    """
    Packs the immediate entries of `src_dir` (each with its subtree) into a
    gzip-compressed tar at `dst_file`, with member names relative to `src_dir`.
    """
    src_dir = Path(src_dir)
    dst_file = Path(dst_file)
    if not src_dir.is_dir():
        raise SourceMissingError(src_dir, "Virtual filesystem directory")

    entries = list_entries(src_dir)
    dst_file.parent.mkdir(parents=True, exist_ok=True)

    with open(dst_file, "wb") as raw:
        with gzip.GzipFile(filename="", mode="wb", fileobj=raw, mtime=0) as gz:
            with tarfile.open(fileobj=gz, mode="w", format=tarfile.PAX_FORMAT) as tar:
                for name in entries:
                    tar.add(src_dir / name, arcname=name, recursive=True, filter=normalize_member)
                members = len(tar.getmembers())

    logger.info(
        "archive_built",
        source=str(src_dir),
        output=str(dst_file),
        entries=len(entries),
        members=members,
        size=dst_file.stat().st_size,
    )
    return dst_file

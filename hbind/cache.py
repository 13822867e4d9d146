#!/usr/bin/env python3
"""
Content-addressed cache of parsed ASTs.

Each header gets one `<basename>.astcache` file holding the header path, the
SHA-256 of its bytes and the raw AST. An entry is only reused while the hash
still matches the file. Every failure here is logged and treated as a miss:
the pipeline must produce the same output with the cache gone.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from hbind.ast import AstNode, load_document

logger = logging.getLogger(__name__)

CACHE_SUFFIX = ".astcache"


class CacheEntry(BaseModel):
    """A persisted parse of one header."""

    libname: str
    hash: str
    ast: dict[str, Any]

    def tree(self) -> AstNode:
        return load_document(self.ast)


def content_hash(path: Path) -> str:
    """SHA-256 hex digest of a file's bytes."""
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()


def cache_file_for(path: Path, cache_dir: Path) -> Path:
    return Path(cache_dir) / f"{Path(path).name}{CACHE_SUFFIX}"


def _ensure_dir(cache_dir: Path) -> bool:
    try:
        Path(cache_dir).mkdir(parents=True, exist_ok=True)
        return True
    except OSError as e:
        logger.warning(f"Cannot create cache directory {cache_dir}: {e}")
        return False


def _discard(cache_file: Path) -> None:
    try:
        cache_file.unlink(missing_ok=True)
        logger.debug(f"Removed stale cache entry {cache_file}")
    except OSError as e:
        logger.warning(f"Failed to remove stale cache entry {cache_file}: {e}")


def lookup(path: Path, cache_dir: Path) -> CacheEntry | None:
    """Return the cached entry for path if it is still valid for the file's bytes."""
    path = Path(path)
    if not _ensure_dir(cache_dir):
        return None

    cache_file = cache_file_for(path, cache_dir)
    if not cache_file.is_file():
        logger.debug(f"Cache miss for {path.name}: no entry")
        return None

    try:
        entry = CacheEntry.model_validate_json(cache_file.read_bytes())
    except (OSError, ValidationError) as e:
        logger.warning(f"Unreadable cache entry {cache_file}: {e}")
        _discard(cache_file)
        return None

    try:
        current = content_hash(path)
    except OSError as e:
        logger.warning(f"Cannot hash {path}, ignoring its cache entry: {e}")
        return None

    if entry.hash != current:
        logger.info(f"Cache entry for {path.name} is stale")
        _discard(cache_file)
        return None

    logger.debug(f"Cache hit for {path.name}")
    return entry


def store(
    path: Path, ast: AstNode, cache_dir: Path, digest: str | None = None
) -> CacheEntry | None:
    """Persist the AST for path, replacing any previous entry for the same basename.

    digest should be the hash of the bytes the AST was parsed from; it is only
    computed here when the caller did not take it before parsing.
    """
    path = Path(path)
    digest = digest or content_hash(path)
    entry = CacheEntry(libname=str(path), hash=digest, ast=ast.to_dict())
    if not _ensure_dir(cache_dir):
        return None

    cache_file = cache_file_for(path, cache_dir)
    # Write beside the target and rename, so readers never see a partial entry
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=cache_file.name, suffix=".tmp", dir=cache_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(entry.model_dump_json())
            os.replace(tmp_name, cache_file)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        logger.warning(f"Failed to write cache entry {cache_file}: {e}")
        return None

    logger.debug(f"Stored cache entry {cache_file}")
    return entry


def clear(cache_dir: Path) -> int:
    """Delete every cache entry in cache_dir, returning how many were removed."""
    cache_dir = Path(cache_dir)
    if not cache_dir.is_dir():
        return 0

    removed = 0
    for cache_file in sorted(cache_dir.glob(f"*{CACHE_SUFFIX}")):
        try:
            cache_file.unlink()
            removed += 1
        except OSError as e:
            logger.warning(f"Failed to remove cache entry {cache_file}: {e}")
    return removed

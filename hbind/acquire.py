#!/usr/bin/env python3
"""Run the external C parser over a header, going through the AST cache."""

import logging
import subprocess
from pathlib import Path

from hbind import cache
from hbind.ast import AstNode, parse_document
from hbind.config import HbindConfig
from hbind.errors import MalformedDocument, ParserFailed, ParserUnavailable

logger = logging.getLogger(__name__)


def run_parser(file_path: Path, config: HbindConfig) -> bytes:
    """Invoke the parser and return its complete stdout, undecoded."""
    command = [*config.parser_command, str(file_path)]
    logger.info(f"Parsing {file_path} with {command[0]}")

    try:
        result = subprocess.run(command, capture_output=True)
    except OSError as e:
        raise ParserUnavailable(f"Cannot start parser {command[0]!r}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        raise ParserFailed(command, result.returncode, stderr)
    return result.stdout


def acquire(file_path: Path, config: HbindConfig) -> AstNode:
    """Return the validated AST for a header, from the cache when it is still fresh."""
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Header {file_path} does not exist")

    if config.use_cache:
        entry = cache.lookup(file_path, config.cache_directory)
        if entry is not None:
            try:
                return entry.tree()
            except MalformedDocument as e:
                logger.warning(f"Ignoring cached AST for {file_path.name}: {e}")

    # Hash before parsing so the entry describes the bytes clang actually saw
    digest = cache.content_hash(file_path) if config.use_cache else None
    ast = parse_document(run_parser(file_path, config))

    if config.use_cache:
        cache.store(file_path, ast, config.cache_directory, digest=digest)
    return ast

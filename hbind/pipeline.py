#!/usr/bin/env python3
"""End-to-end run: header in, binding manifest out."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from hbind.acquire import acquire
from hbind.config import HbindConfig
from hbind.symbols import Symbol, extract_symbols
from hbind.typedefs import TypedefTable, resolve_typedefs

logger = logging.getLogger(__name__)


class BindingManifest(BaseModel):
    """Everything a code emitter needs to bind one shared library."""

    header: str
    library_path: str
    symbols: list[Symbol] = Field(default_factory=list)
    typedefs: TypedefTable = Field(default_factory=dict)


def default_library_path(header: Path) -> Path:
    """The shared object is expected beside the header, without the .h suffix."""
    header = Path(header)
    if header.suffix == ".h":
        return header.with_suffix("")
    return header


def generate_bindings(
    header: Path,
    config: HbindConfig | None = None,
    library_path: Path | None = None,
) -> BindingManifest:
    """Parse a header and extract its symbol table."""
    config = config or HbindConfig()
    header = Path(header)

    ast = acquire(header, config)
    typedefs = resolve_typedefs(ast)
    symbols = extract_symbols(ast, typedefs)
    logger.info(f"Extracted {len(symbols)} symbols from {header.name}")

    return BindingManifest(
        header=str(header),
        library_path=str(library_path or default_library_path(header)),
        symbols=symbols,
        typedefs=typedefs,
    )

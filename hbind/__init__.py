"""
hbind - statically-typed FFI symbol tables from C headers

Runs clang's JSON AST dump over a header, resolves its typedef chains and
classifies every function signature into a closed set of wire types that a
runtime-specific code emitter can consume.
"""

from .acquire import acquire
from .ast import AstNode, find_nodes, parse_document, traverse
from .config import HbindConfig
from .errors import (
    CyclicTypedef,
    HbindError,
    MalformedDocument,
    NodeShapeError,
    ParserFailed,
    ParserUnavailable,
    UnknownType,
)
from .pipeline import BindingManifest, generate_bindings
from .symbols import Symbol, extract_symbols
from .typedefs import resolve_typedefs
from .wire import WireType, classify

__all__ = [
    'acquire',
    'AstNode', 'find_nodes', 'parse_document', 'traverse',
    'HbindConfig',
    'CyclicTypedef', 'HbindError', 'MalformedDocument', 'NodeShapeError',
    'ParserFailed', 'ParserUnavailable', 'UnknownType',
    'BindingManifest', 'generate_bindings',
    'Symbol', 'extract_symbols',
    'resolve_typedefs',
    'WireType', 'classify',
]

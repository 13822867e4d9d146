#!/usr/bin/env python3
"""Extract exported function signatures from an AST as wire-typed symbols."""

import logging

from pydantic import BaseModel, Field

from hbind.ast import AstNode, FunctionDecl, ParamDecl, decode_node, iter_decoded
from hbind.errors import NodeShapeError
from hbind.typedefs import TypedefTable
from hbind.wire import WireType, classify

logger = logging.getLogger(__name__)


class Symbol(BaseModel):
    """A function signature expressed purely in wire types."""

    name: str
    args: list[WireType] = Field(default_factory=list)
    arg_names: list[str] = Field(default_factory=list)
    ret: WireType


def return_spelling(function_type: str) -> str:
    """Return type of a function type spelling such as 'int (int, int)'."""
    return function_type.split("(", 1)[0].strip()


def symbol_from_decl(decl: FunctionDecl, typedefs: TypedefTable) -> Symbol | None:
    """Build the symbol for one declaration.

    Returns None when a parameter node is malformed: dropping it would shift
    every later argument.
    """
    args: list[WireType] = []
    arg_names: list[str] = []

    for child in decl.children:
        if child.kind != ParamDecl.KIND:
            continue
        try:
            param = decode_node(child)
        except NodeShapeError as e:
            logger.warning(f"Leaving out function {decl.name}: {e}")
            return None
        if not isinstance(param, ParamDecl):
            continue
        arg_names.append(param.label(len(args)))
        args.append(classify(param.type.qual_type, typedefs))

    ret = classify(return_spelling(decl.type.qual_type), typedefs)
    return Symbol(name=decl.name, args=args, arg_names=arg_names, ret=ret)


def extract_symbols(ast: AstNode, typedefs: TypedefTable) -> list[Symbol]:
    """Every well-formed function declaration, in declaration order.

    UnknownType and CyclicTypedef propagate: a partial binding set is never
    returned.
    """
    symbols = []
    for decl in iter_decoded(ast, FunctionDecl):
        symbol = symbol_from_decl(decl, typedefs)
        if symbol is not None:
            symbols.append(symbol)
    return symbols

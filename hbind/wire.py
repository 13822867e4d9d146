#!/usr/bin/env python3
"""Classify C type spellings into the closed set of FFI wire types."""

import re
from enum import Enum

from hbind.errors import CyclicTypedef, UnknownType
from hbind.typedefs import TypedefTable


class WireType(str, Enum):
    VOID = "void"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"
    CHAR = "char"
    CSTRING = "cstring"
    POINTER = "ptr"
    FUNCTION = "function"


# Exact spellings only. Integer keyword types use LP64 widths.
BUILTIN_SPELLINGS: dict[str, WireType] = {
    "void": WireType.VOID,
    "int8_t": WireType.I8,
    "int16_t": WireType.I16,
    "int32_t": WireType.I32,
    "int64_t": WireType.I64,
    "int": WireType.I32,
    "uint8_t": WireType.U8,
    "uint16_t": WireType.U16,
    "uint32_t": WireType.U32,
    "uint64_t": WireType.U64,
    "signed char": WireType.I8,
    "unsigned char": WireType.U8,
    "short": WireType.I16,
    "unsigned short": WireType.U16,
    "unsigned int": WireType.U32,
    "long": WireType.I64,
    "unsigned long": WireType.U64,
    "long long": WireType.I64,
    "unsigned long long": WireType.U64,
    "float": WireType.F32,
    "double": WireType.F64,
    "bool": WireType.BOOL,
    "_Bool": WireType.BOOL,
    "char": WireType.CHAR,
    "char *": WireType.CSTRING,
}

# (ret)(*)(args) as well as clang's own `ret (*)(args)`
_FUNCTION_POINTER = re.compile(r"^(\(.*\)|[^()]+?)\s*\(\s*\*\s*\)\s*\(.*\)$")


def resolve_alias(spelling: str, typedefs: TypedefTable) -> str:
    """Follow a typedef chain until it reaches a built-in or a non-alias spelling."""
    chain = [spelling]
    current = spelling
    while current not in BUILTIN_SPELLINGS:
        target = typedefs.get(current)
        if target is None:
            break
        if target in chain:
            raise CyclicTypedef(spelling, chain + [target])
        chain.append(target)
        current = target
    return current


def _classify_shape(spelling: str) -> WireType | None:
    if spelling.rstrip().endswith("*"):
        return WireType.POINTER
    if _FUNCTION_POINTER.match(spelling.strip()):
        return WireType.FUNCTION
    return None


def classify(spelling: str, typedefs: TypedefTable | None = None) -> WireType:
    """Map a C type spelling to its wire type.

    Rules apply in order: exact built-in spelling, typedef chain, trailing
    pointer marker, function-pointer shape. Raises UnknownType when none
    applies and CyclicTypedef when a typedef chain loops.
    """
    typedefs = typedefs or {}

    if spelling in BUILTIN_SPELLINGS:
        return BUILTIN_SPELLINGS[spelling]

    resolved = spelling
    if spelling in typedefs:
        resolved = resolve_alias(spelling, typedefs)
        if resolved in BUILTIN_SPELLINGS:
            return BUILTIN_SPELLINGS[resolved]

    wire = _classify_shape(resolved)
    if wire is None:
        raise UnknownType(spelling)
    return wire

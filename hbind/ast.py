#!/usr/bin/env python3
"""
Typed view of clang's JSON AST dump.

The parser output is decoded into a tree of `AstNode`s that keep every field
clang emitted, so a tree can be written back verbatim. The handful of node
kinds the binding pipeline understands are decoded on demand into typed
variants; a node that claims one of those kinds but lacks a required field is
reported and otherwise ignored.
"""

import json
import logging
from collections.abc import Callable, Iterator
from typing import Any, ClassVar, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hbind.errors import MalformedDocument, NodeShapeError

logger = logging.getLogger(__name__)


class AstNode(BaseModel):
    """A single node of the translation unit, children in declaration order."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    kind: str
    loc: dict[str, Any] = Field(default_factory=dict)
    inner: list["AstNode"] = Field(default_factory=list)

    @property
    def fields(self) -> dict[str, Any]:
        """Kind-specific fields (name, type, mangledName, ...)."""
        return self.model_extra or {}

    def to_dict(self) -> dict[str, Any]:
        """Dump the subtree in the shape it was parsed from."""
        return self.model_dump(exclude_unset=True)


class QualType(BaseModel):
    """Type descriptor attached to declarations."""

    model_config = ConfigDict(populate_by_name=True)

    qual_type: str = Field(alias="qualType")
    desugared_qual_type: str | None = Field(default=None, alias="desugaredQualType")


class FunctionDecl(BaseModel):
    KIND: ClassVar[str] = "FunctionDecl"

    node: AstNode
    name: str
    mangled_name: str = Field(alias="mangledName")
    type: QualType

    @property
    def children(self) -> list[AstNode]:
        return self.node.inner


class ParamDecl(BaseModel):
    KIND: ClassVar[str] = "ParmVarDecl"

    node: AstNode
    # clang omits the name of unnamed parameters
    name: str | None = None
    type: QualType

    def label(self, index: int) -> str:
        return self.name or f"arg{index}"


class TypedefDecl(BaseModel):
    KIND: ClassVar[str] = "TypedefDecl"

    node: AstNode
    name: str
    type: QualType

    @property
    def canonical(self) -> str:
        return self.type.desugared_qual_type or self.type.qual_type


class BuiltinType(BaseModel):
    KIND: ClassVar[str] = "BuiltinType"

    node: AstNode
    type: QualType


class OtherNode(BaseModel):
    """Any node kind the pipeline has no use for."""

    node: AstNode


TypedNode = Union[FunctionDecl, ParamDecl, TypedefDecl, BuiltinType, OtherNode]

_VARIANTS: dict[str, type[BaseModel]] = {
    variant.KIND: variant for variant in (FunctionDecl, ParamDecl, TypedefDecl, BuiltinType)
}

V = TypeVar("V", FunctionDecl, ParamDecl, TypedefDecl, BuiltinType)


def decode_node(node: AstNode) -> TypedNode:
    """Decode a node into its typed variant.

    Raises NodeShapeError if the node claims a known kind but is missing
    (or has an ill-typed) required field.
    """
    variant = _VARIANTS.get(node.kind)
    if variant is None:
        return OtherNode(node=node)

    try:
        return variant.model_validate({**node.fields, "node": node})
    except ValidationError as e:
        missing = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise NodeShapeError(node.id, node.kind, missing) from e


def traverse(node: AstNode, visit: Callable[[AstNode], None]) -> None:
    """Pre-order depth-first walk, children in declaration order."""
    visit(node)
    for child in node.inner:
        traverse(child, visit)


def find_nodes(node: AstNode, predicate: Callable[[AstNode], bool]) -> list[AstNode]:
    """Collect every node matching predicate, in traversal order."""
    found: list[AstNode] = []

    def collect(current: AstNode):
        if predicate(current):
            found.append(current)

    traverse(node, collect)
    return found


def iter_decoded(root: AstNode, variant: type[V]) -> Iterator[V]:
    """Yield the well-shaped nodes of one variant in traversal order."""
    for node in find_nodes(root, lambda n: n.kind == variant.KIND):
        try:
            decoded = decode_node(node)
        except NodeShapeError:
            continue
        if isinstance(decoded, variant):
            yield decoded


def validate_tree(root: AstNode) -> list[NodeShapeError]:
    """Check every node's kind-specific fields, logging each problem found."""
    problems: list[NodeShapeError] = []

    def check(node: AstNode):
        try:
            decode_node(node)
        except NodeShapeError as e:
            logger.warning(f"{e}; node {node.id} will be ignored")
            problems.append(e)

    traverse(root, check)
    return problems


def load_document(data: Any) -> AstNode:
    """Build and validate a tree from already-decoded JSON data."""
    try:
        root = AstNode.model_validate(data)
    except ValidationError as e:
        raise MalformedDocument(
            f"Document is not an AST ({e.error_count()} invalid node field(s)): {e}"
        ) from e

    validate_tree(root)
    return root


def parse_document(text: str | bytes) -> AstNode:
    """Parse the parser's JSON output into a validated AST."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedDocument(f"Parser output is not valid JSON: {e}") from e
    return load_document(data)

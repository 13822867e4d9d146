#!/usr/bin/env python3

from hbind.ast import AstNode, TypedefDecl, iter_decoded

TypedefTable = dict[str, str]


def resolve_typedefs(ast: AstNode) -> TypedefTable:
    """Map every typedef name to its canonical spelling.

    The desugared spelling wins over the written one. When the canonical
    spelling is itself an alias seen earlier, the alias is recorded with that
    alias's target, so chains declared in order collapse as they are built.
    Anything left over is walked by the classifier.
    """
    typedefs: TypedefTable = {}
    for decl in iter_decoded(ast, TypedefDecl):
        canonical = decl.canonical
        typedefs[decl.name] = typedefs.get(canonical, canonical)
    return typedefs

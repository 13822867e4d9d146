#!/usr/bin/env python3

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from hbind.config import HbindConfig


class ClangAst:
    """Builds documents shaped like `clang -Xclang -ast-dump=json` output."""

    def __init__(self):
        self._next_id = 0

    def _node(self, kind: str, **fields) -> dict:
        self._next_id += 1
        node = {"id": f"0x{self._next_id:x}", "kind": kind, "loc": {}, "range": {}}
        node.update(fields)
        return node

    def tu(self, *decls: dict) -> dict:
        return self._node("TranslationUnitDecl", inner=list(decls))

    def func(self, name: str, qual_type: str, *params: dict) -> dict:
        fields = {"name": name, "mangledName": name, "type": {"qualType": qual_type}}
        if params:
            fields["inner"] = list(params)
        return self._node("FunctionDecl", **fields)

    def param(self, name: str | None, qual_type: str) -> dict:
        fields = {"type": {"qualType": qual_type}}
        if name is not None:
            fields["name"] = name
        return self._node("ParmVarDecl", **fields)

    def typedef(self, name: str, qual_type: str, desugared: str | None = None) -> dict:
        type_ = {"qualType": qual_type}
        if desugared is not None:
            type_["desugaredQualType"] = desugared
        builtin = self._node("BuiltinType", type={"qualType": desugared or qual_type})
        return self._node("TypedefDecl", name=name, type=type_, inner=[builtin])

    def node(self, kind: str, **fields) -> dict:
        return self._node(kind, **fields)


@pytest.fixture
def clang():
    return ClangAst()


@pytest.fixture
def header(tmp_path) -> Path:
    """A header file on disk; the fake parser never reads it, the cache hashes it."""
    path = tmp_path / "simple.h"
    path.write_text("int func(int a, int b);\n")
    return path


@pytest.fixture
def config(tmp_path) -> HbindConfig:
    return HbindConfig(cache_directory=tmp_path / "cache")


@pytest.fixture
def fake_parser():
    """Patch subprocess.run in the acquisition module.

    Set `fake_parser.document` to the dict the parser should print.
    """
    with patch("hbind.acquire.subprocess.run") as run:

        def respond(command, **kwargs):
            return MagicMock(returncode=0, stdout=json.dumps(run.document).encode(), stderr=b"")

        run.document = {"id": "0x0", "kind": "TranslationUnitDecl", "inner": []}
        run.side_effect = respond
        yield run

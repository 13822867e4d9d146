#!/usr/bin/env python3

import json
from unittest.mock import MagicMock, patch

import pytest

from hbind import cache
from hbind.acquire import acquire
from hbind.config import DEFAULT_PARSER_COMMAND, HbindConfig
from hbind.errors import MalformedDocument, ParserFailed, ParserUnavailable


@pytest.fixture
def document(clang):
    return clang.tu(clang.func("func", "int (int, int)", clang.param("a", "int"), clang.param("b", "int")))


def test_runs_parser_with_header_path(header, config, fake_parser, document):
    fake_parser.document = document
    ast = acquire(header, config)

    assert ast.to_dict() == document
    command = fake_parser.call_args.args[0]
    assert command == [*DEFAULT_PARSER_COMMAND, str(header)]


def test_cached_parse_is_reused(header, config, fake_parser, document):
    fake_parser.document = document

    first = acquire(header, config)
    second = acquire(header, config)

    assert fake_parser.call_count == 1
    assert first == second


def test_changed_header_is_reparsed(header, config, fake_parser, document, clang):
    fake_parser.document = document
    acquire(header, config)
    old_hash = cache.lookup(header, config.cache_directory).hash

    header.write_text("void other(void);\n")
    fake_parser.document = clang.tu(clang.func("other", "void (void)"))
    ast = acquire(header, config)

    assert fake_parser.call_count == 2
    assert ast.inner[0].fields["name"] == "other"
    assert cache.lookup(header, config.cache_directory).hash != old_hash


def test_cache_disabled(header, tmp_path, fake_parser, document):
    config = HbindConfig(use_cache=False, cache_directory=tmp_path / "cache")
    fake_parser.document = document

    acquire(header, config)
    acquire(header, config)

    assert fake_parser.call_count == 2
    assert not (tmp_path / "cache").exists()


def test_corrupt_cached_ast_falls_back_to_parser(header, config, fake_parser, document):
    config.cache_directory.mkdir()
    entry = cache.CacheEntry(libname=str(header), hash=cache.content_hash(header), ast={"kind": "x"})
    cache.cache_file_for(header, config.cache_directory).write_text(entry.model_dump_json())
    fake_parser.document = document

    ast = acquire(header, config)

    assert fake_parser.call_count == 1
    assert ast.to_dict() == document


def test_custom_parser_command(header, fake_parser):
    config = HbindConfig(use_cache=False, parser_command=["clang-18", "-Xclang", "-ast-dump=json", "-fsyntax-only"])
    acquire(header, config)
    assert fake_parser.call_args.args[0][0] == "clang-18"


def test_missing_header(tmp_path, config, fake_parser):
    with pytest.raises(FileNotFoundError):
        acquire(tmp_path / "missing.h", config)
    fake_parser.assert_not_called()


def test_parser_not_installed(header, config):
    with patch("hbind.acquire.subprocess.run", side_effect=FileNotFoundError("clang")):
        with pytest.raises(ParserUnavailable, match="clang"):
            acquire(header, config)


def test_parser_failure(header, config):
    result = MagicMock(returncode=1, stdout=b"", stderr=b"simple.h:1:1: error: unknown type name 'foo'\n")
    with patch("hbind.acquire.subprocess.run", return_value=result):
        with pytest.raises(ParserFailed) as exc_info:
            acquire(header, config)

    assert exc_info.value.returncode == 1
    assert "unknown type name" in str(exc_info.value)
    assert not cache.cache_file_for(header, config.cache_directory).exists()


def test_garbage_output(header, config):
    result = MagicMock(returncode=0, stdout=b"TranslationUnitDecl 0x1 <<invalid sloc>>", stderr=b"")
    with patch("hbind.acquire.subprocess.run", return_value=result):
        with pytest.raises(MalformedDocument):
            acquire(header, config)

    assert not cache.cache_file_for(header, config.cache_directory).exists()


def test_non_utf8_output(header, config):
    result = MagicMock(returncode=0, stdout=b'{"id": "0x1", "kind": "\xff"}', stderr=b"")
    with patch("hbind.acquire.subprocess.run", return_value=result):
        with pytest.raises(MalformedDocument):
            acquire(header, config)


def test_header_edited_during_parse_is_not_cached_as_fresh(header, config, fake_parser, clang):
    old_document = clang.tu(clang.func("func", "int (int, int)"))
    new_document = clang.tu(clang.func("other", "void (void)"))

    def edit_while_parsing(command, **kwargs):
        header.write_text("void other(void);\n")
        return MagicMock(returncode=0, stdout=json.dumps(old_document).encode(), stderr=b"")

    fake_parser.side_effect = edit_while_parsing
    acquire(header, config)

    fake_parser.side_effect = None
    fake_parser.return_value = MagicMock(returncode=0, stdout=json.dumps(new_document).encode(), stderr=b"")
    ast = acquire(header, config)

    assert fake_parser.call_count == 2
    assert ast.inner[0].fields["name"] == "other"


def test_parser_failure_with_non_utf8_stderr(header, config):
    result = MagicMock(returncode=1, stdout=b"", stderr=b"simple.h:1:10: error: bad byte \xff\n")
    with patch("hbind.acquire.subprocess.run", return_value=result):
        with pytest.raises(ParserFailed) as exc_info:
            acquire(header, config)

    assert "bad byte \ufffd" in exc_info.value.stderr

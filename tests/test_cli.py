"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dart_inspect import cli
from dart_inspect.cli import EX_CONFIG, EX_IOERR, EX_NOINPUT, EX_UNAVAILABLE, EX_USAGE, _build_parser
from dart_inspect.parser import ParserUnavailableError
from dart_inspect.scanner import DartInspector
from dart_inspect.syntax import ClassDeclaration, CompilationUnit, FieldDeclaration, ImportDirective
from tests._fixtures.source_tree import SourceTreeBuilder, StubParser


@pytest.fixture
def stub_inspector(monkeypatch: pytest.MonkeyPatch) -> StubParser:
    parser = StubParser(
        {
            "model": CompilationUnit(
                directives=[ImportDirective("dart:io")],
                declarations=[
                    ClassDeclaration(
                        "Model",
                        [FieldDeclaration(["id"], "int", is_final=True), FieldDeclaration(["_cache"], "Cache")],
                    )
                ],
            )
        }
    )

    def _factory(policy, *, exclude_paths=()):  # type: ignore[no-untyped-def]
        return DartInspector(policy, parser=parser, exclude_paths=exclude_paths)

    monkeypatch.setattr(cli, "DartInspector", _factory)
    return parser


def test_cli_parses_filter_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["lib", "--private-only", "--no-imports", "--markdown"])

    assert args.directory == "lib"
    assert args.private_only is True
    assert args.no_imports is True
    assert args.no_final is False
    assert args.output_format == "markdown"


def test_cli_rejects_two_output_formats() -> None:
    parser = _build_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["lib", "--simple", "--markdown"])


def test_cli_accepts_verbose_flag() -> None:
    args = _build_parser().parse_args(["lib", "-v"])

    assert args.verbose is True
    assert args.output_format is None


def test_main_without_directory_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 0
    assert "usage: dart-inspect" in capsys.readouterr().out


def test_main_rejects_final_only_with_no_final(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path), "--final-only", "--no-final"])

    assert excinfo.value.code == EX_USAGE


def test_main_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "missing")])

    assert excinfo.value.code == EX_NOINPUT


def test_main_invalid_config(source_tree: SourceTreeBuilder) -> None:
    source_tree.write({".dart_inspect.yml": "format: html\n"})

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(source_tree.path())])

    assert excinfo.value.code == EX_CONFIG


def test_main_simple_report(
    source_tree: SourceTreeBuilder,
    stub_inspector: StubParser,
    capsys: pytest.CaptureFixture[str],
) -> None:
    (path,) = source_tree.write({"lib/model.dart": "model"})

    cli.main([str(source_tree.path())])

    out = capsys.readouterr().out
    assert out.startswith("dart_inspect\n")
    assert "Options   : (none)\n" in out
    assert f"{path}\n" in out
    assert "Imports:\n  dart:io\n" in out
    assert "Model\n  int id\n  Cache _cache\n" in out


def test_main_json_report_applies_config_and_flags(
    source_tree: SourceTreeBuilder,
    stub_inspector: StubParser,
    capsys: pytest.CaptureFixture[str],
) -> None:
    source_tree.write(
        {
            "lib/model.dart": "model",
            ".dart_inspect.yml": "options:\n  no_imports: true\n",
        }
    )

    cli.main([str(source_tree.path()), "--json", "--private-only"])

    lines = capsys.readouterr().out.splitlines()
    assert [json.loads(line)["className"] for line in lines] == ["Model"]
    assert json.loads(lines[0])["fields"] == [{"name": "_cache", "type": "Cache"}]


def test_main_reports_unavailable_parser(
    source_tree: SourceTreeBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    source_tree.write({"lib/model.dart": "model"})

    def _factory(policy, *, exclude_paths=()):  # type: ignore[no-untyped-def]
        raise ParserUnavailableError("no dart grammar")

    monkeypatch.setattr(cli, "DartInspector", _factory)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(source_tree.path())])

    assert excinfo.value.code == EX_UNAVAILABLE


def test_main_reports_unreadable_source(
    source_tree: SourceTreeBuilder,
    stub_inspector: StubParser,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    source_tree.write({"lib/model.dart": "model"})

    def _fail(self: Path, *args: object, **kwargs: object) -> str:
        raise PermissionError(f"denied: {self}")

    monkeypatch.setattr(Path, "read_text", _fail)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(source_tree.path())])

    assert excinfo.value.code == EX_IOERR
    assert stub_inspector.parsed == []


def test_main_writes_log_file(
    source_tree: SourceTreeBuilder, stub_inspector: StubParser, tmp_path: Path
) -> None:
    source_tree.write({"lib/model.dart": "model"})
    log_file = tmp_path / "inspect.log"

    cli.main([str(source_tree.path()), "--json", "-v", "--log-file", str(log_file)])
    cli.main([str(source_tree.path()), "--json"])

    text = log_file.read_text(encoding="utf-8")
    assert "Wrote 2 records" in text
    assert "dart_inspect.cli" in text

"""Helpers for writing throwaway Dart source trees and stubbing the parser."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import List, Mapping

from dart_inspect.parser import SourceParser
from dart_inspect.syntax import CompilationUnit


class SourceTreeBuilder:
    """Utility for writing files into a temporary source directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> List[Path]:
        """Write `path -> contents` entries and return the written paths."""
        written: List[Path] = []
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
            written.append(path)
        return written

    def path(self) -> Path:
        return self.root


class StubParser(SourceParser):
    """Returns prebuilt syntax trees keyed by the (stripped) source text."""

    def __init__(self, units: Mapping[str, CompilationUnit] | None = None) -> None:
        self._units = dict(units or {})
        self.parsed: List[str] = []

    def parse(self, source: str) -> CompilationUnit:
        key = source.strip()
        self.parsed.append(key)
        return self._units.get(key, CompilationUnit())


__all__ = ["SourceTreeBuilder", "StubParser"]

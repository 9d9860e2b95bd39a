"""Scanning Dart sources from strings, files and directory trees."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .extractor import extract
from .logging import get_logger
from .models import ReportRecord
from .parser import SourceParser, TreeSitterDartParser
from .policy import DEFAULT_POLICY, FilterPolicy

SOURCE_SUFFIX = ".dart"


@dataclass
class ExcludeRule:
    """A path pattern from ``exclude_paths`` in .dart_inspect.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            return fnmatchcase(rel_path, self.pattern)

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_exclude_rule(pattern: str) -> ExcludeRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return ExcludeRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _raise_walk_error(error: OSError) -> None:
    raise error


class DartInspector:
    """Produces report records for Dart code, one file at a time.

    Every ``scan_*`` method returns a generator: nothing is read or parsed
    until the caller asks for the next record, and abandoning the iteration
    stops the scan.
    """

    def __init__(
        self,
        policy: FilterPolicy | None = None,
        *,
        parser: SourceParser | None = None,
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.policy = policy or DEFAULT_POLICY
        self.parser = parser or TreeSitterDartParser()
        self.logger = get_logger("scanner")
        self._exclude_rules: List[ExcludeRule] = [
            rule for rule in (build_exclude_rule(p) for p in exclude_paths) if rule is not None
        ]

    def scan_code(self, content: str, file_path: Optional[str] = None) -> Iterator[ReportRecord]:
        """Parse ``content`` and yield its records, tagged with ``file_path``."""
        unit = self.parser.parse(content)
        for diagnostic in unit.diagnostics:
            self.logger.debug("%s:%s", file_path or "<source>", diagnostic)
        yield from extract(unit, file_path=file_path, policy=self.policy)

    def scan_file(self, path: str | os.PathLike[str]) -> Iterator[ReportRecord]:
        """Read a single Dart file and yield its records.

        Read errors propagate to the caller.
        """
        file_path = Path(path)
        self.logger.debug("Scanning %s", file_path)
        content = file_path.read_text(encoding="utf-8")
        yield from self.scan_code(content, file_path=str(file_path))

    def scan_directory(self, root: str | os.PathLike[str]) -> Iterator[ReportRecord]:
        """Recursively scan ``root`` for ``.dart`` files, in walk order."""
        for path in self.iter_source_files(root):
            yield from self.scan_file(path)

    def iter_source_files(self, root: str | os.PathLike[str]) -> Iterator[Path]:
        """Yield Dart files under ``root`` without following symbolic links."""
        root_path = Path(root)
        if not root_path.exists():
            raise FileNotFoundError(f"Directory not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {root}")

        for dirpath, dirnames, filenames in os.walk(
            root_path, followlinks=False, onerror=_raise_walk_error
        ):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root_path).as_posix() if current_dir != root_path else ""

            if self._exclude_rules:
                dirnames[:] = [
                    name
                    for name in dirnames
                    if not self._is_excluded(f"{rel_dir}/{name}" if rel_dir else name, True)
                ]

            for filename in filenames:
                if not filename.endswith(SOURCE_SUFFIX):
                    continue
                path = current_dir / filename
                if path.is_symlink():
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._is_excluded(rel_path, False):
                    self.logger.debug("Excluded %s", rel_path)
                    continue
                yield path

    def _is_excluded(self, rel_path: str, is_dir: bool) -> bool:
        return any(rule.matches(rel_path, is_dir) for rule in self._exclude_rules)


__all__ = ["DartInspector", "ExcludeRule", "SOURCE_SUFFIX", "build_exclude_rule"]

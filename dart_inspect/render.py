"""Report rendering: banner, per-file sections and record output."""

from __future__ import annotations

import json
from typing import Iterable, Optional, TextIO

from .models import FileImportsRecord, ReportRecord
from .policy import FilterPolicy


def write_banner(out: TextIO, directory: str, policy: FilterPolicy, output_format: str) -> None:
    """Write the report header describing the scan configuration."""
    if output_format == "json":
        return
    options = policy.options
    if output_format == "markdown":
        out.write("# Dart Inspect Report\n\n")
        out.write("## Configuration\n\n")
        out.write(f"- Directory: `{directory}`\n")
        out.write("- Format: markdown\n")
        if not options:
            out.write("- Options: (none)\n")
        else:
            out.write("- Options:\n")
            for option in options:
                out.write(f"  {option}\n")
        out.write("\n")
        return

    out.write("dart_inspect\n")
    out.write("─" * 60 + "\n")
    out.write(f"Directory : {directory}\n")
    out.write(f"Format    : {output_format}\n")
    out.write(f"Options   : {', '.join(options) if options else '(none)'}\n")
    out.write("\n")


def write_records(out: TextIO, records: Iterable[ReportRecord], output_format: str) -> int:
    """Write ``records`` as they arrive; returns how many were written.

    In the text formats a file heading is printed whenever the file path
    changes, and records are then rendered without their own path.
    """
    count = 0
    last_path: Optional[str] = None
    first = True
    for record in records:
        count += 1
        if output_format == "json":
            out.write(json.dumps(record.to_dict()) + "\n")
            continue

        if first or record.file_path != last_path:
            first = False
            last_path = record.file_path
            _write_file_heading(out, record.file_path, output_format)

        if output_format == "markdown":
            out.write(record.to_markdown(with_file_path=False) + "\n")
            if isinstance(record, FileImportsRecord):
                out.write("\n")
        elif isinstance(record, FileImportsRecord):
            out.write("Imports:\n")
            for imp in record.imports:
                out.write(f"  {imp}\n")
            out.write("\n")
        else:
            out.write(record.to_text(with_file_path=False) + "\n")
    return count


def _write_file_heading(out: TextIO, file_path: Optional[str], output_format: str) -> None:
    if output_format == "markdown":
        out.write("-" * 80 + "\n\n")
        out.write(f"## {file_path}\n\n")
    else:
        out.write("=" * 80 + "\n")
        out.write(f"{file_path}\n\n")


__all__ = ["write_banner", "write_records"]

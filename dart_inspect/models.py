"""Report records emitted by the extraction engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class FieldInfo:
    """An instance field: its name and declared type as written in source."""

    name: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldInfo":
        return cls(name=str(data["name"]), type=str(data["type"]))

    def __str__(self) -> str:
        return f"{self.type} {self.name}"


@dataclass(frozen=True)
class ImportInfo:
    """A single `import` directive."""

    uri: str
    prefix: Optional[str] = None
    is_deferred: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"uri": self.uri, "prefix": self.prefix, "deferred": self.is_deferred}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImportInfo":
        prefix = data.get("prefix")
        return cls(
            uri=str(data.get("uri") or ""),
            prefix=str(prefix) if prefix is not None else None,
            is_deferred=bool(data.get("deferred", False)),
        )

    def _suffix(self) -> str:
        suffix = ""
        if self.prefix is not None:
            suffix += f" as {self.prefix}"
        if self.is_deferred:
            suffix += " (deferred)"
        return suffix

    def to_markdown(self) -> str:
        return f"- `{self.uri}`{self._suffix()}"

    def to_text(self) -> str:
        return f"{self.uri}{self._suffix()}"

    def __str__(self) -> str:
        return self.to_text()


@dataclass(frozen=True)
class ClassFieldsRecord:
    """Instance fields declared by one class, in declaration order."""

    class_name: str
    fields: Tuple[FieldInfo, ...]
    file_path: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "className": self.class_name,
            "filePath": self.file_path,
            "fields": [field.to_dict() for field in self.fields],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClassFieldsRecord":
        return cls(
            class_name=str(data["className"]),
            fields=tuple(FieldInfo.from_dict(item) for item in data.get("fields") or []),
            file_path=data.get("filePath"),
        )

    def to_markdown(self, with_file_path: bool = True) -> str:
        lines = [f"### {self.class_name}\n"]
        if with_file_path and self.file_path:
            lines.append(f"\nFile: {self.file_path}\n")
        lines.append("\n")
        lines.extend(f"- {field}\n" for field in self.fields)
        return "".join(lines)

    def to_text(self, with_file_path: bool = True) -> str:
        header = self.class_name
        if with_file_path and self.file_path:
            header += f" ({self.file_path})"
        lines = [f"{header}\n"]
        lines.extend(f"  {field}\n" for field in self.fields)
        return "".join(lines)

    def __str__(self) -> str:
        return self.to_text()


@dataclass(frozen=True)
class FileImportsRecord:
    """All imports of one file, in declaration order."""

    imports: Tuple[ImportInfo, ...]
    file_path: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "imports", tuple(self.imports))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.file_path,
            "imports": [imp.to_dict() for imp in self.imports],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FileImportsRecord":
        return cls(
            imports=tuple(ImportInfo.from_dict(item) for item in data.get("imports") or []),
            file_path=data.get("filePath"),
        )

    def to_markdown(self, with_file_path: bool = True) -> str:
        lines = ["### Imports\n"]
        if with_file_path and self.file_path is not None:
            lines.append(f"\nFile: {self.file_path}\n")
        lines.append("\n")
        lines.extend(f"{imp.to_markdown()}\n" for imp in self.imports)
        return "".join(lines)

    def to_text(self, with_file_path: bool = True) -> str:
        header = "Imports"
        if with_file_path and self.file_path is not None:
            header += f" ({self.file_path})"
        lines = [f"{header}\n"]
        lines.extend(f"  {imp}\n" for imp in self.imports)
        return "".join(lines)

    def __str__(self) -> str:
        return self.to_text()


ReportRecord = Union[ClassFieldsRecord, FileImportsRecord]


def record_from_dict(data: Mapping[str, Any]) -> ReportRecord:
    """Rebuild a record from the mapping produced by its `to_dict`."""
    if "className" in data:
        return ClassFieldsRecord.from_dict(data)
    if "imports" in data:
        return FileImportsRecord.from_dict(data)
    raise ValueError("Mapping does not describe a class or imports record")


__all__ = [
    "ClassFieldsRecord",
    "FieldInfo",
    "FileImportsRecord",
    "ImportInfo",
    "ReportRecord",
    "record_from_dict",
]

"""Inspect Dart sources for imports and class fields."""

from .extractor import extract
from .models import ClassFieldsRecord, FieldInfo, FileImportsRecord, ImportInfo, ReportRecord, record_from_dict
from .parser import ParserUnavailableError, SourceParser, TreeSitterDartParser
from .policy import DEFAULT_POLICY, FilterPolicy, PolicyError
from .scanner import DartInspector

__all__ = [
    "ClassFieldsRecord",
    "DEFAULT_POLICY",
    "DartInspector",
    "FieldInfo",
    "FileImportsRecord",
    "FilterPolicy",
    "ImportInfo",
    "ParserUnavailableError",
    "PolicyError",
    "ReportRecord",
    "SourceParser",
    "TreeSitterDartParser",
    "extract",
    "record_from_dict",
]

"""Turns one parsed file into import and class-field report records."""

from __future__ import annotations

from typing import Iterator, List, Optional

from .models import ClassFieldsRecord, FieldInfo, FileImportsRecord, ImportInfo, ReportRecord
from .policy import DEFAULT_POLICY, FilterPolicy, keep_field
from .syntax import ClassDeclaration, CompilationUnit, FieldDeclaration, ImportDirective

DYNAMIC_TYPE = "dynamic"


def extract(
    unit: CompilationUnit,
    file_path: Optional[str] = None,
    policy: FilterPolicy = DEFAULT_POLICY,
) -> Iterator[ReportRecord]:
    """Yield the report records for ``unit``.

    The imports record (if any) always comes first, followed by one record
    per class that still has fields after filtering. Files without imports
    and classes without surviving fields produce nothing.
    """
    if not policy.no_imports:
        imports = collect_imports(unit)
        if imports:
            yield FileImportsRecord(tuple(imports), file_path=file_path)

    if not policy.no_classes:
        for declaration in unit.declarations:
            if not isinstance(declaration, ClassDeclaration):
                continue
            fields = collect_fields(declaration, policy)
            if fields:
                yield ClassFieldsRecord(declaration.name, tuple(fields), file_path=file_path)


def collect_imports(unit: CompilationUnit) -> List[ImportInfo]:
    imports: List[ImportInfo] = []
    for directive in unit.directives:
        if not isinstance(directive, ImportDirective):
            continue
        imports.append(
            ImportInfo(
                directive.uri or "",
                prefix=directive.prefix,
                is_deferred=directive.deferred,
            )
        )
    return imports


def collect_fields(declaration: ClassDeclaration, policy: FilterPolicy) -> List[FieldInfo]:
    """Return the instance fields of ``declaration`` that pass ``policy``."""
    fields: List[FieldInfo] = []
    for member in declaration.members:
        if not isinstance(member, FieldDeclaration) or member.is_static:
            continue
        field_type = member.type or DYNAMIC_TYPE
        for name in member.names:
            field = FieldInfo(name, field_type)
            if keep_field(policy, field, member.is_final):
                fields.append(field)
    return fields


__all__ = ["DYNAMIC_TYPE", "collect_fields", "collect_imports", "extract"]

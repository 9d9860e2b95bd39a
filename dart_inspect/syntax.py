"""Parser-neutral syntax tree consumed by the extractor.

Only the node kinds the extractor cares about are modelled; anything else a
parser finds is carried as an ``Other*`` placeholder so source order is kept
and unknown constructs can be skipped without special cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union


@dataclass(frozen=True)
class ImportDirective:
    uri: Optional[str]
    prefix: Optional[str] = None
    deferred: bool = False


@dataclass(frozen=True)
class OtherDirective:
    keyword: str


Directive = Union[ImportDirective, OtherDirective]


@dataclass(frozen=True)
class FieldDeclaration:
    """One field declaration; several names may share the type and modifiers."""

    names: Tuple[str, ...]
    type: Optional[str] = None
    is_final: bool = False
    is_static: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))


@dataclass(frozen=True)
class OtherMember:
    kind: str


Member = Union[FieldDeclaration, OtherMember]


@dataclass(frozen=True)
class ClassDeclaration:
    name: str
    members: Iterable[Member] = ()


@dataclass(frozen=True)
class OtherDeclaration:
    kind: str
    name: Optional[str] = None


Declaration = Union[ClassDeclaration, OtherDeclaration]


@dataclass(frozen=True)
class CompilationUnit:
    """A parsed file.

    ``directives`` and ``declarations`` must be re-iterable in source order.
    Parsers may hand out lazy sequences so that walking stops as soon as the
    consumer stops asking for records.
    """

    directives: Iterable[Directive] = ()
    declarations: Iterable[Declaration] = ()
    diagnostics: Tuple[str, ...] = ()


__all__ = [
    "ClassDeclaration",
    "CompilationUnit",
    "Declaration",
    "Directive",
    "FieldDeclaration",
    "ImportDirective",
    "Member",
    "OtherDeclaration",
    "OtherDirective",
    "OtherMember",
]

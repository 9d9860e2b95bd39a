"""Field filtering options and the predicates that apply them."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import FrozenSet, List

from .models import FieldInfo

PRIVATE_PREFIX = "_"

PRIMITIVE_TYPES: FrozenSet[str] = frozenset(
    {
        "String",
        "int",
        "num",
        "double",
        "bool",
        "Object",
        "dynamic",
        "DateTime",
    }
)

_ASYNC_WRAPPER = "Future"

PRIMITIVE_CLOSURE: FrozenSet[str] = frozenset(
    set(PRIMITIVE_TYPES)
    | {f"{name}?" for name in PRIMITIVE_TYPES}
    | {f"{_ASYNC_WRAPPER}<{name}>" for name in PRIMITIVE_TYPES}
    | {f"{_ASYNC_WRAPPER}<{name}?>" for name in PRIMITIVE_TYPES}
)

# attribute -> (summary flag, CLI option)
_OPTION_NAMES = {
    "private_only": ("privateOnly", "--private-only"),
    "no_primitives": ("noPrimitives", "--no-primitives"),
    "final_only": ("finalOnly", "--final-only"),
    "no_final": ("noFinal", "--no-final"),
    "no_classes": ("noClasses", "--no-classes"),
    "no_imports": ("noImports", "--no-imports"),
    "markdown": ("markdown", "--markdown"),
}


class PolicyError(ValueError):
    """Raised when a FilterPolicy is built from contradictory options."""


@dataclass(frozen=True)
class FilterPolicy:
    """Controls which imports and fields end up in the report.

    ``final_only`` and ``no_final`` are mutually exclusive; asking for both
    raises :class:`PolicyError` at construction time. ``markdown`` only
    selects the output format and is never read by the extractor.
    """

    private_only: bool = False
    no_primitives: bool = False
    final_only: bool = False
    no_final: bool = False
    no_classes: bool = False
    no_imports: bool = False
    markdown: bool = False

    def __post_init__(self) -> None:
        if self.final_only and self.no_final:
            raise PolicyError("Cannot use final_only together with no_final")

    @property
    def simple(self) -> bool:
        return not self.markdown

    @property
    def flags(self) -> List[str]:
        """Summary names of the enabled options, in declaration order."""
        return [_OPTION_NAMES[item.name][0] for item in fields(self) if getattr(self, item.name)]

    @property
    def options(self) -> List[str]:
        """CLI flag names of the enabled options, in declaration order."""
        return [_OPTION_NAMES[item.name][1] for item in fields(self) if getattr(self, item.name)]

    def __str__(self) -> str:
        enabled = self.flags
        if not enabled:
            return "FilterPolicy(default)"
        return f"FilterPolicy({', '.join(enabled)})"


DEFAULT_POLICY = FilterPolicy()


def passes_visibility(policy: FilterPolicy, name: str) -> bool:
    return not policy.private_only or name.startswith(PRIVATE_PREFIX)


def passes_finality(policy: FilterPolicy, is_final: bool) -> bool:
    if policy.final_only and not is_final:
        return False
    if policy.no_final and is_final:
        return False
    return True


def passes_primitives(policy: FilterPolicy, type_name: str) -> bool:
    return not policy.no_primitives or type_name not in PRIMITIVE_CLOSURE


def keep_field(policy: FilterPolicy, field: FieldInfo, is_final: bool) -> bool:
    """Return True when ``field`` survives every filter in ``policy``."""
    return (
        passes_visibility(policy, field.name)
        and passes_finality(policy, is_final)
        and passes_primitives(policy, field.type)
    )


__all__ = [
    "DEFAULT_POLICY",
    "FilterPolicy",
    "PRIMITIVE_CLOSURE",
    "PRIMITIVE_TYPES",
    "PRIVATE_PREFIX",
    "PolicyError",
    "keep_field",
    "passes_finality",
    "passes_primitives",
    "passes_visibility",
]

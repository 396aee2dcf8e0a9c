from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .names import to_qualified


class TypeKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"


@dataclass(frozen=True)
class TypeMetadata:
    """One compiled type, keyed by its internal (slash-form) name."""

    name: str
    kind: TypeKind = TypeKind.CLASS
    is_abstract: bool = False
    super_name: str | None = None
    interfaces: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "interfaces", frozenset(self.interfaces))

    @property
    def qualified_name(self) -> str:
        return to_qualified(self.name)

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    @property
    def is_concrete(self) -> bool:
        return not self.is_abstract and not self.is_interface


@dataclass(frozen=True)
class ProvidesDeclaration:
    service: str
    providers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ModuleDescriptor:
    name: str
    provides: tuple[ProvidesDeclaration, ...] = ()

    def providers_for(self, service: str) -> tuple[str, ...]:
        out: list[str] = []
        for decl in self.provides:
            if decl.service == service:
                out.extend(decl.providers)
        return tuple(out)

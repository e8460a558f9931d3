"""
Go type-expression model.

The parser turns tree-sitter type nodes into these immutable values so the
schema translator never touches syntax nodes directly. Named references stay
unresolved here; resolving them is the job of a TypeOracle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol


class TypeExpr:
    """Base class for all type expressions."""

    kind: str = "unknown"


@dataclass(frozen=True)
class BasicType(TypeExpr):
    """A predeclared Go basic type such as int64 or string."""

    name: str
    kind: str = field(default="basic", init=False)


@dataclass(frozen=True)
class NamedType(TypeExpr):
    """
    A reference to a type by name.

    `package` is the qualifier for `pkg.Name` references and None for
    identifiers local to the declaring package.
    """

    name: str
    package: Optional[str] = None
    kind: str = field(default="named", init=False)

    @property
    def qualified(self) -> bool:
        return self.package is not None

    def __str__(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name


@dataclass(frozen=True)
class PointerType(TypeExpr):
    elem: TypeExpr
    kind: str = field(default="pointer", init=False)


@dataclass(frozen=True)
class ArrayType(TypeExpr):
    """Arrays, slices and variadic parameters. `length` is None for slices."""

    elem: TypeExpr
    length: Optional[str] = None
    kind: str = field(default="array", init=False)


@dataclass(frozen=True)
class StructType(TypeExpr):
    fields: tuple = ()  # tuple[FieldDecl, ...]
    kind: str = field(default="struct", init=False)


@dataclass(frozen=True)
class MapType(TypeExpr):
    key: TypeExpr
    value: TypeExpr
    kind: str = field(default="map", init=False)


@dataclass(frozen=True)
class ChanType(TypeExpr):
    elem: TypeExpr
    kind: str = field(default="chan", init=False)


@dataclass(frozen=True)
class FuncType(TypeExpr):
    kind: str = field(default="func", init=False)


@dataclass(frozen=True)
class InterfaceType(TypeExpr):
    kind: str = field(default="interface", init=False)


@dataclass(frozen=True)
class UnsupportedType(TypeExpr):
    """Anything the parser recognised as a type but does not model (generics, etc.)."""

    node_type: str
    text: str = ""
    kind: str = field(default="unsupported", init=False)


# Predeclared identifiers of the Go universe scope that denote types.
PREDECLARED_BASIC = frozenset({
    "bool",
    "string",
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "byte", "rune",
    "float32", "float64",
    "complex64", "complex128",
})

PREDECLARED_INTERFACES = frozenset({"error", "any", "comparable"})


def predeclared_type(name: str) -> Optional[TypeExpr]:
    """Return the universe-scope type for `name`, or None if it is not predeclared."""
    if name in PREDECLARED_BASIC:
        return BasicType(name)
    if name in PREDECLARED_INTERFACES:
        return InterfaceType()
    return None


# Identity of a named type: (package, name).
TypeIdentity = tuple


class TypeOracle(Protocol):
    """
    Type-resolution capability the schema translator depends on.

    Implemented by SourceAnalysisProvider; tests substitute a hand-built fake.
    """

    def find_function(self, name: str):  # -> FunctionDecl
        ...

    def resolve_named(
        self, named: NamedType, package: str
    ) -> Optional[tuple[TypeIdentity, TypeExpr, str]]:
        """
        Resolve `named` as seen from `package`.

        Returns (identity, underlying type expression, declaring package), or
        None when the name cannot be resolved.
        """
        ...

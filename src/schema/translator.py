"""
Go function → JSON Schema translation.

Walks a function's parameter list, resolving each parameter type through a
TypeOracle and expanding structs and arrays into nested Definitions. Types
the translator does not model degrade to `{"type": "null"}` leaves; malformed
struct tags abort the translation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..analysis.data import FieldDecl, FunctionDecl
from ..analysis.types import (
    ArrayType,
    BasicType,
    NamedType,
    PointerType,
    StructType,
    TypeExpr,
    TypeOracle,
)
from ..config import TranslatorConfig
from .comments import cleanup_comment
from .errors import ParameterError, ParameterTagError, TagSyntaxError, TypeResolutionError
from .models import DataType, Definition, FunctionDetails
from .tags import enum_values, is_required, parse_tag_literal

logger = logging.getLogger(__name__)

BASIC_TYPES: dict[str, DataType] = {
    "bool": DataType.BOOLEAN,
    "int": DataType.INTEGER,
    "int8": DataType.INTEGER,
    "int16": DataType.INTEGER,
    "int32": DataType.INTEGER,
    "int64": DataType.INTEGER,
    "uint": DataType.INTEGER,
    "uint8": DataType.INTEGER,
    "uint16": DataType.INTEGER,
    "uint32": DataType.INTEGER,
    "uint64": DataType.INTEGER,
    "uintptr": DataType.INTEGER,
    "byte": DataType.INTEGER,
    "rune": DataType.INTEGER,
    "float32": DataType.NUMBER,
    "float64": DataType.NUMBER,
    "string": DataType.STRING,
}


def field_name(decl: FieldDecl, position: int) -> str:
    """
    Property name for one parameter or struct field declaration.

    A grouped declaration (`a, b int`) is named after its first identifier.
    Embedded fields are named after their type; unnamed and blank
    parameters get `argN`.
    """
    names = [n for n in decl.names if n and n != "_"]
    if names:
        return names[0]
    if decl.embedded:
        embedded = decl.type
        while isinstance(embedded, PointerType):
            embedded = embedded.elem
        if isinstance(embedded, NamedType):
            return embedded.name
    return f"arg{position}"


class SchemaTranslator:
    """
    Builds FunctionDetails for a Go function.

    The translator keeps no state between calls; the set of named types
    being expanded travels down the recursion.
    """

    def __init__(self, oracle: TypeOracle, config: Optional[TranslatorConfig] = None) -> None:
        self.oracle = oracle
        self.config = config or TranslatorConfig()

    def translate(self, func_name: str) -> FunctionDetails:
        """Look up `func_name` through the oracle and translate it."""
        return self.translate_function(self.oracle.find_function(func_name))

    def translate_function(self, fn: FunctionDecl) -> FunctionDetails:
        parameters = Definition(type=DataType.OBJECT)
        scope = _Scope(package=fn.package, type_params=frozenset(fn.type_params))

        for position, param in enumerate(fn.params):
            name = field_name(param, position)
            try:
                definition = self._field_to_definition(param, scope, frozenset())
            except TagSyntaxError as exc:
                raise ParameterTagError(name, exc) from exc
            except TypeResolutionError as exc:
                raise ParameterError(name, exc) from exc
            parameters.add_property(name, definition, required=True)

        if self.config.flatten_single_parameter and len(parameters.properties) == 1:
            (parameters,) = parameters.properties.values()

        logger.debug(f"Translated {fn.name} ({fn.location}) with {len(fn.params)} parameter(s)")
        return FunctionDetails(
            name=fn.name,
            description=cleanup_comment(fn.doc),
            parameters=parameters,
        )

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------

    def _field_to_definition(self, decl: FieldDecl, scope: "_Scope", expanding: frozenset) -> Definition:
        definition = self.type_to_definition(decl.type, scope, expanding)
        definition.description = cleanup_comment(decl.doc, decl.comment)

        tags = parse_tag_literal(decl.tag)
        enum = enum_values(tags, self.config)
        if enum is not None:
            definition.enum = enum
        return definition

    def type_to_definition(
        self, expr: TypeExpr, scope: "_Scope", expanding: frozenset = frozenset()
    ) -> Definition:
        """
        Translate one type expression.

        `expanding` holds the identities of named types on the current path;
        meeting one again means the type refers to itself.
        """
        if isinstance(expr, NamedType):
            return self._named_to_definition(expr, scope, expanding)
        if isinstance(expr, BasicType):
            return Definition(type=BASIC_TYPES.get(expr.name, DataType.NULL))
        if isinstance(expr, PointerType):
            return self.type_to_definition(expr.elem, scope, expanding)
        if isinstance(expr, ArrayType):
            return Definition(
                type=DataType.ARRAY,
                items=self.type_to_definition(expr.elem, scope, expanding),
            )
        if isinstance(expr, StructType):
            return self._struct_to_definition(expr, scope, expanding)

        logger.debug(f"Unsupported {expr.kind} type in package {scope.package!r}; using null")
        return Definition(type=DataType.NULL)

    def _named_to_definition(self, named: NamedType, scope: "_Scope", expanding: frozenset) -> Definition:
        if not named.qualified and named.name in scope.type_params:
            logger.debug(f"Type parameter {named} has no schema; using null")
            return Definition(type=DataType.NULL)

        resolved = self.oracle.resolve_named(named, scope.package)
        if resolved is None:
            if not named.qualified:
                raise TypeResolutionError(named.name, scope.package)
            logger.debug(f"Type {named} is outside the loaded packages; using null")
            return Definition(type=DataType.NULL)

        identity, underlying, package = resolved
        if identity in expanding:
            logger.warning(f"Recursive type {named} in package {scope.package!r}; using null")
            return Definition(type=DataType.NULL)

        inner = _Scope(package=package, type_params=frozenset())
        return self.type_to_definition(underlying, inner, expanding | {identity})

    def _struct_to_definition(self, struct: StructType, scope: "_Scope", expanding: frozenset) -> Definition:
        definition = Definition(type=DataType.OBJECT)
        for position, decl in enumerate(struct.fields):
            name = field_name(decl, position)
            try:
                child_tags = parse_tag_literal(decl.tag)
            except TagSyntaxError as exc:
                raise exc.for_field(name) from exc
            try:
                child = self._field_to_definition(decl, scope, expanding)
            except TagSyntaxError as exc:
                if exc.field:
                    raise
                raise exc.for_field(name) from exc
            definition.add_property(name, child, required=is_required(child_tags, self.config))
        return definition


@dataclass(frozen=True)
class _Scope:
    """Package a type expression is interpreted in, plus visible type parameters."""

    package: str
    type_params: frozenset = frozenset()

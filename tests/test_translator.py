"""
Tests for the schema translator.

The translator only talks to a TypeOracle, so these tests drive it with a
hand-built fake instead of parsing Go source.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

# Add the repository root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from src.analysis.data import CommentBlock, FieldDecl, FunctionDecl
from src.analysis.types import (
    ArrayType,
    ChanType,
    FuncType,
    InterfaceType,
    MapType,
    NamedType,
    PointerType,
    StructType,
    TypeExpr,
    predeclared_type,
)
from src.config import TranslatorConfig
from src.schema.errors import (
    FunctionNotFound,
    ParameterError,
    ParameterTagError,
    TagSyntaxError,
    TypeResolutionError,
)
from src.schema.models import DataType, Definition
from src.schema.tags import ERR_TAG_VALUE_SYNTAX
from src.schema.translator import SchemaTranslator, field_name
from src.storage.output import render_json


PKG = "sample"


class FakeOracle:
    """In-memory TypeOracle: a package's type table plus its functions."""

    def __init__(self, types: Optional[dict[str, TypeExpr]] = None, functions=()) -> None:
        self.types = types or {}
        self.functions = list(functions)
        self.resolved: list[str] = []

    def find_function(self, name: str) -> FunctionDecl:
        for fn in self.functions:
            if fn.name == name:
                return fn
        raise FunctionNotFound(name, "fake")

    def resolve_named(self, named: NamedType, package: str):
        self.resolved.append(str(named))
        if named.qualified:
            return None
        if named.name in self.types:
            return (package, named.name), self.types[named.name], package
        builtin = predeclared_type(named.name)
        if builtin is not None:
            return ("", named.name), builtin, package
        return None


def doc(*lines: str) -> CommentBlock:
    return CommentBlock(texts=tuple(lines))


def param(name: str, type_expr: TypeExpr, **kwargs) -> FieldDecl:
    return FieldDecl(names=(name,) if name else (), type=type_expr, **kwargs)


def func(name: str, *params: FieldDecl, **kwargs) -> FunctionDecl:
    return FunctionDecl(name=name, package=PKG, file_path="fake.go", params=list(params), **kwargs)


def translate(fn: FunctionDecl, types=None, config=None):
    return SchemaTranslator(FakeOracle(types, [fn]), config).translate(fn.name)


WIDGET_OPTIONS = StructType(fields=(
    param("FactoryName", NamedType("string"), doc=doc("// The name of the factory")),
    param("Category", NamedType("string"), doc=doc("// Category"), tag='`enum:"foo,bar" json:"fieldb"`'),
    param("InventoryLevels", ArrayType(NamedType("int")), doc=doc("// InventoryLevels")),
    param("Operational", NamedType("bool")),
))


# =============================================================================
# Test: parameter lists
# =============================================================================

class TestParameterList:
    def test_zero_parameters(self):
        details = translate(func("Ping"))
        assert details.parameters.type == DataType.OBJECT
        assert details.parameters.properties == {}
        assert details.parameters.required == []

    def test_single_scalar_is_flattened(self):
        details = translate(func("Square", param("x", NamedType("int"))))
        assert details.parameters == Definition(type=DataType.INTEGER)

    def test_multiple_parameters_required_in_order(self):
        details = translate(func(
            "Move",
            param("dx", NamedType("float64")),
            param("dy", NamedType("float32")),
            param("label", NamedType("string")),
        ))
        params = details.parameters
        assert params.type == DataType.OBJECT
        assert list(params.properties) == ["dx", "dy", "label"]
        assert params.required == ["dx", "dy", "label"]
        assert params.properties["dx"].type == DataType.NUMBER
        assert params.properties["label"].type == DataType.STRING

    def test_grouped_names_take_first(self):
        details = translate(func(
            "Add",
            FieldDecl(names=("a", "b"), type=NamedType("int")),
            param("label", NamedType("string")),
        ))
        assert details.parameters.required == ["a", "label"]
        assert details.parameters.properties["a"].type == DataType.INTEGER

    def test_single_grouped_declaration_is_flattened(self):
        details = translate(func("Add", FieldDecl(names=("a", "b"), type=NamedType("int"))))
        assert details.parameters == Definition(type=DataType.INTEGER)

    def test_unnamed_parameters_get_positional_names(self):
        details = translate(func(
            "Handler",
            param("", NamedType("string")),
            param("_", NamedType("int")),
        ))
        assert details.parameters.required == ["arg0", "arg1"]

    def test_variadic_parameter_is_array(self):
        details = translate(func(
            "Join",
            param("sep", NamedType("string")),
            param("parts", ArrayType(NamedType("string")), variadic=True),
        ))
        parts = details.parameters.properties["parts"]
        assert parts.type == DataType.ARRAY
        assert parts.items.type == DataType.STRING

    def test_flattening_can_be_disabled(self):
        config = TranslatorConfig(flatten_single_parameter=False)
        details = translate(func("Square", param("x", NamedType("int"))), config=config)
        assert details.parameters.type == DataType.OBJECT
        assert details.parameters.required == ["x"]

    def test_flattening_is_top_level_only(self):
        inner = StructType(fields=(param("Only", NamedType("string")),))
        details = translate(func("Wrap", param("opts", inner), param("n", NamedType("int"))))
        opts = details.parameters.properties["opts"]
        assert opts.type == DataType.OBJECT
        assert list(opts.properties) == ["Only"]

    def test_parameter_description(self):
        details = translate(func(
            "Greet",
            param("name", NamedType("string"), doc=doc("// Who to greet"), comment=doc("// required")),
            param("loud", NamedType("bool")),
        ))
        assert details.parameters.properties["name"].description == "Who to greet required"
        assert details.parameters.properties["loud"].description == ""

    def test_function_description(self):
        fn = func("Greet", doc=doc("// Greet says hello.", "// It is polite."))
        assert translate(fn).description == "Greet says hello. It is polite."

    def test_missing_function(self):
        translator = SchemaTranslator(FakeOracle())
        with pytest.raises(FunctionNotFound) as exc_info:
            translator.translate("Nope")
        assert exc_info.value.name == "Nope"


# =============================================================================
# Test: type resolution
# =============================================================================

class TestTypeResolution:
    @pytest.mark.parametrize("name,expected", [
        ("bool", DataType.BOOLEAN),
        ("int8", DataType.INTEGER),
        ("uint64", DataType.INTEGER),
        ("byte", DataType.INTEGER),
        ("rune", DataType.INTEGER),
        ("float64", DataType.NUMBER),
        ("string", DataType.STRING),
        ("complex128", DataType.NULL),
    ])
    def test_basic_types(self, name, expected):
        details = translate(func("F", param("v", NamedType(name))))
        assert details.parameters.type == expected

    @pytest.mark.parametrize("type_expr", [
        ChanType(NamedType("string")),
        MapType(NamedType("string"), NamedType("int")),
        InterfaceType(),
        FuncType(),
        NamedType("error"),
        NamedType("Time", package="time"),
    ])
    def test_unsupported_types_degrade_to_null(self, type_expr):
        details = translate(func(
            "F",
            param("odd", type_expr),
            param("name", NamedType("string")),
        ))
        assert details.parameters.properties["odd"] == Definition(type=DataType.NULL)
        assert details.parameters.properties["name"].type == DataType.STRING
        assert details.parameters.required == ["odd", "name"]

    def test_undefined_type_raises(self):
        with pytest.raises(ParameterError) as exc_info:
            translate(func(
                "F",
                param("a", NamedType("Undefined")),
                param("b", NamedType("int")),
            ))
        err = exc_info.value
        assert err.parameter == "a"
        assert isinstance(err.cause, TypeResolutionError)
        assert err.cause.name == "Undefined"
        assert err.cause.package == PKG
        assert not isinstance(err, TagSyntaxError)

    def test_undefined_type_in_struct_field_raises(self):
        struct = StructType(fields=(param("Inner", ArrayType(NamedType("Missing"))),))
        with pytest.raises(ParameterError) as exc_info:
            translate(func("F", param("opts", struct)))
        assert exc_info.value.parameter == "opts"
        assert "undefined type 'Missing'" in str(exc_info.value)

    def test_pointer_is_erased(self):
        details = translate(func("F", param("p", PointerType(PointerType(NamedType("int"))))))
        assert details.parameters == Definition(type=DataType.INTEGER)

    def test_nested_arrays(self):
        details = translate(func("F", param("grid", ArrayType(ArrayType(NamedType("float32"))))))
        grid = details.parameters
        assert grid.type == DataType.ARRAY
        assert grid.items.type == DataType.ARRAY
        assert grid.items.items == Definition(type=DataType.NUMBER)

    def test_named_basic_type(self):
        details = translate(
            func("F", param("t", NamedType("Celsius"))),
            types={"Celsius": NamedType("float64")},
        )
        assert details.parameters.type == DataType.NUMBER

    def test_type_parameters_are_null(self):
        fn = func("Map", param("xs", ArrayType(NamedType("T"))), type_params=("T",))
        details = translate(fn, types={"T": NamedType("string")})
        assert details.parameters.items.type == DataType.NULL

    def test_recursive_struct_degrades(self):
        node = StructType(fields=(
            param("Value", NamedType("int")),
            param("Next", PointerType(NamedType("Node"))),
        ))
        details = translate(func("Walk", param("head", NamedType("Node"))), types={"Node": node})
        head = details.parameters
        assert head.type == DataType.OBJECT
        assert head.properties["Value"].type == DataType.INTEGER
        assert head.properties["Next"] == Definition(type=DataType.NULL)
        assert head.required == ["Value", "Next"]

    def test_mutual_recursion_degrades(self):
        types = {
            "A": StructType(fields=(param("B", PointerType(NamedType("B"))),)),
            "B": StructType(fields=(param("A", ArrayType(NamedType("A"))),)),
        }
        details = translate(func("F", param("a", NamedType("A"))), types=types)
        b = details.parameters.properties["B"]
        assert b.type == DataType.OBJECT
        assert b.properties["A"].type == DataType.ARRAY
        assert b.properties["A"].items.type == DataType.NULL

    def test_same_type_twice_is_not_a_cycle(self):
        types = {"Point": StructType(fields=(param("X", NamedType("int")),))}
        details = translate(func(
            "Line",
            param("from", NamedType("Point")),
            param("to", NamedType("Point")),
        ), types=types)
        assert details.parameters.properties["from"] == details.parameters.properties["to"]
        assert details.parameters.properties["to"].type == DataType.OBJECT


# =============================================================================
# Test: structs and tags
# =============================================================================

class TestStructs:
    def test_widget_factory_scenario(self):
        fn = func(
            "NewWidgetFactory",
            param("factoryInfo", NamedType("NewWidgetFactoryOptions")),
            doc=doc("// NewWidgetFactory creates a new widget factory."),
        )
        details = translate(fn, types={"NewWidgetFactoryOptions": WIDGET_OPTIONS})

        assert details.to_dict() == {
            "name": "NewWidgetFactory",
            "description": "NewWidgetFactory creates a new widget factory.",
            "parameters": {
                "type": "object",
                "properties": {
                    "FactoryName": {"type": "string", "description": "The name of the factory"},
                    "Category": {"type": "string", "description": "Category", "enum": ["foo", "bar"]},
                    "InventoryLevels": {
                        "type": "array",
                        "description": "InventoryLevels",
                        "items": {"type": "integer"},
                    },
                    "Operational": {"type": "boolean"},
                },
                "required": ["FactoryName", "Category", "InventoryLevels", "Operational"],
            },
        }

    def test_required_tag(self):
        struct = StructType(fields=(
            param("Always", NamedType("string")),
            param("Optional", NamedType("string"), tag='`required:"false"`'),
            param("AlsoOptional", NamedType("int"), tag='`required:"NO"`'),
            param("Zero", NamedType("int"), tag='`required:"0"`'),
            param("Explicit", NamedType("int"), tag='`required:"true"`'),
        ))
        details = translate(func("F", param("opts", struct)))
        assert list(details.parameters.properties) == [
            "Always", "Optional", "AlsoOptional", "Zero", "Explicit",
        ]
        assert details.parameters.required == ["Always", "Explicit"]

    def test_required_tag_ignored_on_parameters(self):
        details = translate(func(
            "F",
            param("a", NamedType("int"), tag='`required:"false"`'),
            param("b", NamedType("int")),
        ))
        assert details.parameters.required == ["a", "b"]

    def test_enum_on_array_field(self):
        struct = StructType(fields=(
            param("Tags", ArrayType(NamedType("string")), tag='`enum:"x,y,z"`'),
        ))
        details = translate(func("F", param("opts", struct)))
        assert details.parameters.properties["Tags"].enum == ["x", "y", "z"]

    def test_embedded_field_named_after_type(self):
        types = {"Base": StructType(fields=(param("ID", NamedType("int")),))}
        struct = StructType(fields=(
            FieldDecl(names=(), type=PointerType(NamedType("Base")), embedded=True),
            param("Name", NamedType("string")),
        ))
        details = translate(func("F", param("opts", struct)), types=types)
        assert details.parameters.required == ["Base", "Name"]
        assert details.parameters.properties["Base"].properties["ID"].type == DataType.INTEGER

    def test_malformed_tag_aborts(self):
        struct = StructType(fields=(
            param("Good", NamedType("string")),
            param("Mode", NamedType("string"), tag="`enum:foo`"),
        ))
        with pytest.raises(ParameterError) as exc_info:
            translate(func("F", param("opts", struct)))

        err = exc_info.value
        assert err.parameter == "opts"
        assert isinstance(err.cause, TagSyntaxError)
        assert err.cause.field == "Mode"
        assert err.cause.reason == ERR_TAG_VALUE_SYNTAX
        assert "issue parsing parameter 'opts'" in str(err)

    def test_malformed_tag_is_a_tag_error(self):
        struct = StructType(fields=(param("Mode", NamedType("string"), tag="`enum:foo`"),))
        with pytest.raises(TagSyntaxError) as exc_info:
            translate(func("F", param("opts", struct)))

        err = exc_info.value
        assert isinstance(err, ParameterTagError)
        assert isinstance(err, ParameterError)
        assert err.parameter == "opts"
        assert err.field == "Mode"
        assert err.reason == ERR_TAG_VALUE_SYNTAX
        assert str(err).startswith("issue parsing parameter 'opts': field 'Mode'")

    def test_grouped_fields_take_first_name(self):
        struct = StructType(fields=(
            FieldDecl(names=("X", "Y"), type=NamedType("int")),
            param("Z", NamedType("int")),
        ))
        details = translate(func("F", param("point", struct)))
        assert list(details.parameters.properties) == ["X", "Z"]
        assert details.parameters.required == ["X", "Z"]

    def test_nested_malformed_tag_names_inner_field(self):
        inner = StructType(fields=(param("Deep", NamedType("string"), tag='`enum:"a,a"`'),))
        outer = StructType(fields=(param("Inner", inner),))
        with pytest.raises(ParameterError) as exc_info:
            translate(func("F", param("opts", outer), param("n", NamedType("int"))))
        assert exc_info.value.cause.field == "Deep"


# =============================================================================
# Test: JSON boundary
# =============================================================================

class TestJsonBoundary:
    def test_round_trip(self):
        fn = func(
            "NewWidgetFactory",
            param("factoryInfo", NamedType("NewWidgetFactoryOptions")),
            param("count", NamedType("int")),
        )
        details = translate(fn, types={"NewWidgetFactoryOptions": WIDGET_OPTIONS})
        assert json.loads(render_json(details)) == details.to_dict()

    def test_empty_fields_omitted(self):
        details = translate(func("Ping"))
        assert details.to_dict() == {
            "name": "Ping",
            "description": "",
            "parameters": {"type": "object"},
        }

    def test_key_order(self):
        fn = func("F", param("opts", WIDGET_OPTIONS))
        text = render_json(translate(fn))
        assert list(json.loads(text)) == ["name", "description", "parameters"]
        assert text.index('"type"') < text.index('"properties"') < text.index('"required"')
        assert '\n  "name"' in text


class TestFieldNames:
    def test_named(self):
        assert field_name(param("x", NamedType("int")), 3) == "x"

    def test_embedded_qualified(self):
        decl = FieldDecl(names=(), type=NamedType("Mutex", package="sync"), embedded=True)
        assert field_name(decl, 0) == "Mutex"

    def test_grouped(self):
        assert field_name(FieldDecl(names=("a", "b"), type=NamedType("int")), 0) == "a"

    def test_unnamed(self):
        assert field_name(param("", NamedType("int")), 2) == "arg2"

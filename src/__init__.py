"""
go2schema package entrypoint.

The modules under `go2schema/src` parse a Go package with tree-sitter,
resolve a function's parameter types, and translate them into the JSON
Schema used by function-calling APIs.
"""

from .config import RuntimeConfig, TranslatorConfig
from .orchestration.main import FunctionSchemaGenerator, parse_function
from .schema import (
    DataType,
    Definition,
    FunctionDetails,
    FunctionNotFound,
    ParameterError,
    ParameterTagError,
    ProviderError,
    SchemaError,
    TagSyntaxError,
    TypeResolutionError,
)

__all__ = [
    "DataType",
    "Definition",
    "FunctionDetails",
    "FunctionNotFound",
    "FunctionSchemaGenerator",
    "ParameterError",
    "ParameterTagError",
    "ProviderError",
    "RuntimeConfig",
    "SchemaError",
    "TagSyntaxError",
    "TypeResolutionError",
    "TranslatorConfig",
    "parse_function",
]

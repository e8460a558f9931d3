"""
Schema module: the Go type → JSON Schema translator and its result types.
"""

from .errors import (
    FunctionNotFound,
    ParameterError,
    ParameterTagError,
    ProviderError,
    SchemaError,
    TagSyntaxError,
    TypeResolutionError,
)
from .models import DataType, Definition, FunctionDetails
from .translator import SchemaTranslator

__all__ = [
    "DataType",
    "Definition",
    "FunctionDetails",
    "FunctionNotFound",
    "ParameterError",
    "ParameterTagError",
    "ProviderError",
    "SchemaError",
    "SchemaTranslator",
    "TagSyntaxError",
    "TypeResolutionError",
]

from .main import FunctionSchemaGenerator, parse_function

__all__ = [
    "FunctionSchemaGenerator",
    "parse_function",
]

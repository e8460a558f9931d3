"""
Analysis module for Go source parsing and type resolution.

This module provides tree-sitter based parsing for Go source files and a
provider that resolves function declarations and named types for the
schema translator.
"""

from .data import CompilationUnit, FieldDecl, FunctionDecl, ParsedFile, SourceRange, TypeDecl
from .go_parser import GoParser, parse_go_file
from .provider import SourceAnalysisProvider

__all__ = [
    "CompilationUnit",
    "FieldDecl",
    "FunctionDecl",
    "GoParser",
    "ParsedFile",
    "SourceAnalysisProvider",
    "SourceRange",
    "TypeDecl",
    "parse_go_file",
]

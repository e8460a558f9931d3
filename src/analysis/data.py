"""
Data structures for Go source analysis.

These hold the declarations the schema translator needs: top-level
functions with their parameter lists, type declarations, and the comment
blocks attached to each.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .types import TypeExpr


@dataclass(frozen=True)
class SourceRange:
    """
    A byte range within a source file, plus its 1-indexed line span.
    """
    start_byte: int
    end_byte: int
    start_line: int = 0
    end_line: int = 0

    @property
    def length(self) -> int:
        return self.end_byte - self.start_byte

    def slice(self, source: str | bytes) -> str | bytes:
        """Extract the content from source using this range."""
        return source[self.start_byte:self.end_byte]


@dataclass(frozen=True)
class CommentBlock:
    """
    A group of adjacent comments, kept with their markers (`//`, `/* */`).
    """
    texts: tuple[str, ...] = ()
    range: Optional[SourceRange] = None

    def __bool__(self) -> bool:
        return bool(self.texts)


EMPTY_COMMENT = CommentBlock()


@dataclass(frozen=True)
class FieldDecl:
    """
    One entry of a parameter list or struct field list.

    Attributes:
        names: Declared identifiers. Grouped declarations (`a, b int`) carry
               several; unnamed parameters and embedded fields carry none.
        type: The declared type expression.
        doc: Comment block immediately preceding the declaration.
        comment: Comment on the same line after the declaration.
        tag: Raw struct tag literal including its quotes, if any.
        embedded: True for embedded struct fields.
    """
    names: tuple[str, ...]
    type: TypeExpr
    doc: CommentBlock = EMPTY_COMMENT
    comment: CommentBlock = EMPTY_COMMENT
    tag: Optional[str] = None
    embedded: bool = False
    variadic: bool = False


@dataclass
class FunctionDecl:
    """
    A top-level function or method declaration.

    Attributes:
        name: Function name (e.g., "NewWidgetFactory")
        package: Package clause of the declaring file
        file_path: Path of the declaring file
        params: Ordered parameter declarations
        doc: Leading doc comment block
        receiver: Receiver type name for methods, None for plain functions
        type_params: Names of the function's type parameters
        range: Location of the declaration
    """
    name: str
    package: str
    file_path: str
    params: list[FieldDecl] = field(default_factory=list)
    doc: CommentBlock = EMPTY_COMMENT
    receiver: Optional[str] = None
    type_params: tuple[str, ...] = ()
    range: Optional[SourceRange] = None

    @property
    def is_method(self) -> bool:
        return self.receiver is not None

    @property
    def location(self) -> str:
        line = self.range.start_line if self.range else 0
        return f"{self.file_path}:{line}"


@dataclass
class TypeDecl:
    """A top-level `type Name ...` declaration."""
    name: str
    package: str
    type: TypeExpr
    file_path: str = ""
    alias: bool = False
    generic: bool = False
    doc: CommentBlock = EMPTY_COMMENT


@dataclass
class ParsedFile:
    """
    A Go source file with its top-level declarations.

    Attributes:
        path: File path
        package: Name from the package clause ("" if missing)
        functions: Functions and methods in source order
        types: Type declarations in source order
        parse_errors: Any errors encountered during parsing
    """
    path: str
    package: str = ""
    functions: list[FunctionDecl] = field(default_factory=list)
    types: list[TypeDecl] = field(default_factory=list)
    parse_errors: list[str] = field(default_factory=list)

    @property
    def function_count(self) -> int:
        return len(self.functions)

    def get_function_by_name(self, name: str) -> Optional[FunctionDecl]:
        """Find the first function declared with `name`."""
        for func in self.functions:
            if func.name == name:
                return func
        return None

    def get_type_by_name(self, name: str) -> Optional[TypeDecl]:
        for decl in self.types:
            if decl.name == name:
                return decl
        return None


@dataclass
class CompilationUnit:
    """All parsed files of one package, in path order."""
    package: str
    files: list[ParsedFile] = field(default_factory=list)

    def iter_functions(self):
        for parsed in self.files:
            yield from parsed.functions

    def find_type(self, name: str) -> Optional[TypeDecl]:
        for parsed in self.files:
            decl = parsed.get_type_by_name(name)
            if decl is not None:
                return decl
        return None

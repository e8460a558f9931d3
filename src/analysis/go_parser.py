"""
Go source code parser using tree-sitter.

Extracts top-level function, method and type declarations from Go source
files, together with their doc comments and struct tags, for schema
generation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import tree_sitter
import tree_sitter_go

from .data import (
    EMPTY_COMMENT,
    CommentBlock,
    FieldDecl,
    FunctionDecl,
    ParsedFile,
    SourceRange,
    TypeDecl,
)
from .types import (
    ArrayType,
    ChanType,
    FuncType,
    InterfaceType,
    MapType,
    NamedType,
    PointerType,
    StructType,
    TypeExpr,
    UnsupportedType,
)

logger = logging.getLogger(__name__)

GO_LANGUAGE = tree_sitter.Language(tree_sitter_go.language())

# Anonymous tokens that may sit between a declaration and its comments.
_SEPARATORS = frozenset({",", ";", "\n"})


def _is_separator(node) -> bool:
    if node.is_named:
        return False
    return node.type in _SEPARATORS or not _text(node).strip()


def _text(node) -> str:
    return node.text.decode("utf-8") if node is not None and node.text else ""


def _range(node) -> SourceRange:
    return SourceRange(
        start_byte=node.start_byte,
        end_byte=node.end_byte,
        start_line=node.start_point[0] + 1,
        end_line=node.end_point[0] + 1,
    )


def _comment_block(nodes: list) -> CommentBlock:
    if not nodes:
        return EMPTY_COMMENT
    return CommentBlock(
        texts=tuple(_text(n) for n in nodes),
        range=SourceRange(
            start_byte=nodes[0].start_byte,
            end_byte=nodes[-1].end_byte,
            start_line=nodes[0].start_point[0] + 1,
            end_line=nodes[-1].end_point[0] + 1,
        ),
    )


class GoParser:
    """
    Parser for Go source files.

    Only top-level declarations are collected; function bodies are never
    inspected.
    """

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(GO_LANGUAGE)

    def parse_file(self, file_path: str | Path, source: Optional[str] = None) -> ParsedFile:
        """
        Parse a Go source file and extract its top-level declarations.

        Args:
            file_path: Path to the source file (for metadata)
            source: Optional source code string. If not provided,
                   the file is read from disk.

        Returns:
            ParsedFile; syntax problems are reported in `parse_errors`
        """
        path_str = str(file_path)

        if source is None:
            try:
                source = Path(file_path).read_text(encoding="utf-8")
            except FileNotFoundError:
                return ParsedFile(path=path_str, parse_errors=[f"File not found: {path_str}"])
            except (OSError, UnicodeDecodeError) as e:
                return ParsedFile(path=path_str, parse_errors=[f"Error reading file: {e}"])

        tree = self._parser.parse(source.encode("utf-8"))
        root = tree.root_node
        parsed = ParsedFile(path=path_str)

        if root.has_error:
            parsed.parse_errors.extend(self._collect_errors(path_str, root))

        for child in root.children:
            if child.type == "package_clause":
                ident = child.named_children[0] if child.named_children else None
                parsed.package = _text(ident)
                break

        for child in root.children:
            if child.type == "function_declaration":
                parsed.functions.append(self._function(child, parsed))
            elif child.type == "method_declaration":
                parsed.functions.append(self._function(child, parsed, method=True))
            elif child.type == "type_declaration":
                parsed.types.extend(self._type_declaration(child, parsed))

        logger.debug(
            f"Parsed {path_str}: package={parsed.package!r}, "
            f"{len(parsed.functions)} functions, {len(parsed.types)} types"
        )
        return parsed

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _function(self, node, parsed: ParsedFile, method: bool = False) -> FunctionDecl:
        receiver = None
        if method:
            receiver = self._receiver_name(node.child_by_field_name("receiver"))

        names: list[str] = []
        tp_list = node.child_by_field_name("type_parameters")
        if tp_list is not None:
            for decl in tp_list.named_children:
                names.extend(_text(n) for n in decl.children_by_field_name("name"))
        if method:
            names.extend(self._receiver_type_params(node.child_by_field_name("receiver")))
        type_params = tuple(names)

        params: list[FieldDecl] = []
        param_list = node.child_by_field_name("parameters")
        if param_list is not None:
            for child in param_list.children:
                if child.type == "parameter_declaration":
                    params.append(self._parameter(child))
                elif child.type == "variadic_parameter_declaration":
                    params.append(self._parameter(child, variadic=True))

        return FunctionDecl(
            name=_text(node.child_by_field_name("name")),
            package=parsed.package,
            file_path=parsed.path,
            params=params,
            doc=self._leading_comments(node),
            receiver=receiver,
            type_params=type_params,
            range=_range(node),
        )

    def _receiver_name(self, receiver_list) -> Optional[str]:
        if receiver_list is None:
            return None
        for decl in receiver_list.named_children:
            if decl.type != "parameter_declaration":
                continue
            type_node = decl.child_by_field_name("type")
            while type_node is not None and type_node.type in ("pointer_type", "parenthesized_type"):
                type_node = type_node.named_children[0] if type_node.named_children else None
            if type_node is not None and type_node.type == "generic_type":
                type_node = type_node.child_by_field_name("type")
            return _text(type_node) or None
        return None

    def _receiver_type_params(self, receiver_list) -> list[str]:
        """Names bound by a generic receiver, e.g. `T` in `func (b *Box[T]) ...`."""
        if receiver_list is None:
            return []
        names = []
        pending = list(receiver_list.named_children)
        while pending:
            current = pending.pop(0)
            if current.type == "type_arguments":
                stack = list(current.named_children)
                while stack:
                    arg = stack.pop(0)
                    if arg.type == "type_identifier":
                        names.append(_text(arg))
                    else:
                        stack.extend(arg.named_children)
            else:
                pending.extend(current.named_children)
        return names

    def _parameter(self, node, variadic: bool = False) -> FieldDecl:
        names = tuple(_text(n) for n in node.children_by_field_name("name"))
        param_type = self.convert_type(node.child_by_field_name("type"))
        if variadic:
            param_type = ArrayType(param_type)
        return FieldDecl(
            names=names,
            type=param_type,
            doc=self._leading_comments(node),
            comment=self._trailing_comment(node),
            variadic=variadic,
        )

    def _type_declaration(self, node, parsed: ParsedFile) -> list[TypeDecl]:
        specs = [c for c in node.named_children if c.type in ("type_spec", "type_alias")]
        # A lone spec shares the declaration's doc comment; grouped specs carry their own.
        decl_doc = self._leading_comments(node) if len(specs) == 1 else EMPTY_COMMENT
        decls = []
        for spec in specs:
            doc = decl_doc if len(specs) == 1 else self._leading_comments(spec)
            decls.append(TypeDecl(
                name=_text(spec.child_by_field_name("name")),
                package=parsed.package,
                type=self.convert_type(spec.child_by_field_name("type")),
                file_path=parsed.path,
                alias=spec.type == "type_alias",
                generic=spec.child_by_field_name("type_parameters") is not None,
                doc=doc,
            ))
        return decls

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def convert_type(self, node) -> TypeExpr:
        """Convert a tree-sitter type node into a TypeExpr."""
        if node is None:
            return UnsupportedType("missing")

        kind = node.type
        if kind == "type_identifier":
            return NamedType(_text(node))
        if kind == "qualified_type":
            return NamedType(
                _text(node.child_by_field_name("name")),
                package=_text(node.child_by_field_name("package")),
            )
        if kind in ("pointer_type", "parenthesized_type"):
            inner = [c for c in node.named_children if c.type != "comment"]
            converted = self.convert_type(inner[0] if inner else None)
            return PointerType(converted) if kind == "pointer_type" else converted
        if kind == "slice_type":
            return ArrayType(self.convert_type(node.child_by_field_name("element")))
        if kind == "array_type":
            return ArrayType(
                self.convert_type(node.child_by_field_name("element")),
                length=_text(node.child_by_field_name("length")),
            )
        if kind == "implicit_length_array_type":
            return ArrayType(self.convert_type(node.child_by_field_name("element")), length="...")
        if kind == "struct_type":
            return StructType(fields=tuple(self._struct_fields(node)))
        if kind == "map_type":
            return MapType(
                self.convert_type(node.child_by_field_name("key")),
                self.convert_type(node.child_by_field_name("value")),
            )
        if kind == "channel_type":
            return ChanType(self.convert_type(node.child_by_field_name("value")))
        if kind == "function_type":
            return FuncType()
        if kind == "interface_type":
            return InterfaceType()
        return UnsupportedType(kind, _text(node))

    def _struct_fields(self, struct_node) -> list[FieldDecl]:
        field_list = None
        for child in struct_node.named_children:
            if child.type == "field_declaration_list":
                field_list = child
                break
        if field_list is None:
            return []

        fields = []
        for child in field_list.children:
            if child.type != "field_declaration":
                continue
            names = tuple(_text(n) for n in child.children_by_field_name("name"))
            field_type = self.convert_type(child.child_by_field_name("type"))
            embedded = not names
            if embedded and any(c.type == "*" for c in child.children):
                field_type = PointerType(field_type)
            tag_node = child.child_by_field_name("tag")
            fields.append(FieldDecl(
                names=names,
                type=field_type,
                doc=self._leading_comments(child),
                comment=self._trailing_comment(child),
                tag=_text(tag_node) if tag_node is not None else None,
                embedded=embedded,
            ))
        return fields

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _leading_comments(self, node) -> CommentBlock:
        """
        Collect the comment group ending on the line directly above `node`.

        A comment that trails another declaration on its own line does not
        belong to the group.
        """
        collected = []
        boundary_row = node.start_point[0]
        sibling = node.prev_sibling
        while sibling is not None:
            if _is_separator(sibling):
                sibling = sibling.prev_sibling
                continue
            if sibling.type != "comment":
                break
            if sibling.end_point[0] < boundary_row - 1:
                break
            if self._is_trailing(sibling):
                break
            collected.append(sibling)
            boundary_row = sibling.start_point[0]
            sibling = sibling.prev_sibling
        collected.reverse()
        return _comment_block(collected)

    def _is_trailing(self, comment) -> bool:
        prev = comment.prev_sibling
        while prev is not None and _is_separator(prev):
            prev = prev.prev_sibling
        if prev is None or prev.type == "comment":
            return False
        return prev.end_point[0] == comment.start_point[0]

    def _trailing_comment(self, node) -> CommentBlock:
        """Return the comment that starts on the line `node` ends on, if any."""
        row = node.end_point[0]
        if node.children and node.children[-1].type == "comment":
            last = node.children[-1]
            if last.start_point[0] == row:
                return _comment_block([last])

        sibling = node.next_sibling
        while sibling is not None and sibling.start_point[0] == row:
            if sibling.type == "comment":
                return _comment_block([sibling])
            if not _is_separator(sibling):
                break
            sibling = sibling.next_sibling
        return EMPTY_COMMENT

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _collect_errors(self, path: str, root, limit: int = 10) -> list[str]:
        errors: list[str] = []
        stack = [root]
        while stack and len(errors) < limit:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                row, col = node.start_point[0] + 1, node.start_point[1] + 1
                what = f"missing {node.type}" if node.is_missing else "syntax error"
                errors.append(f"{path}:{row}:{col}: {what}")
                continue
            if node.has_error:
                stack.extend(reversed(node.children))
        return errors


# Module-level convenience function
def parse_go_file(file_path: str | Path, source: Optional[str] = None) -> ParsedFile:
    """
    Parse a Go source file and extract its top-level declarations.

    Example:
        >>> parsed = parse_go_file("testdata/sample_a/a.go")
        >>> [f.name for f in parsed.functions]
        ['SampleFunction', 'SampleFunctionB', 'NewWidgetFactory']
    """
    parser = GoParser()
    return parser.parse_file(file_path, source)

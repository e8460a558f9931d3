"""Error taxonomy for schema generation."""

from __future__ import annotations

from typing import Sequence


class SchemaError(Exception):
    """Base class for every terminal go2schema failure."""


class FunctionNotFound(SchemaError):
    """The requested function is not declared in any analyzed unit."""

    def __init__(self, name: str, location: str = "") -> None:
        self.name = name
        self.location = location
        where = f" in {location}" if location else ""
        super().__init__(f"function not found: {name!r}{where}")


class ProviderError(SchemaError):
    """The source location could not be loaded or parsed."""

    def __init__(self, location: str, diagnostics: Sequence[str]) -> None:
        self.location = location
        self.diagnostics = list(diagnostics)
        detail = "; ".join(self.diagnostics) or "unknown error"
        super().__init__(f"load {location}: {detail}")


class TagSyntaxError(SchemaError):
    """A struct tag on a field could not be parsed."""

    def __init__(self, reason: str, tag: str = "", field: str = "") -> None:
        self.reason = reason
        self.tag = tag
        self.field = field
        super().__init__(self._format())

    def _format(self) -> str:
        msg = f"parse('{self.tag}'): {self.reason}" if self.tag else self.reason
        if self.field:
            msg = f"field '{self.field}': {msg}"
        return msg

    def for_field(self, field: str) -> "TagSyntaxError":
        """Return a copy attributed to `field`."""
        return TagSyntaxError(self.reason, tag=self.tag, field=field)


class ParameterError(SchemaError):
    """Translation of one function parameter failed."""

    def __init__(self, parameter: str, cause: Exception) -> None:
        self.parameter = parameter
        self.cause = cause
        super().__init__(f"issue parsing parameter '{parameter}': {cause}")


class ParameterTagError(ParameterError, TagSyntaxError):
    """A parameter failed because of a malformed struct tag inside it."""

    def __init__(self, parameter: str, cause: TagSyntaxError) -> None:
        super().__init__(parameter, cause)
        # TagSyntaxError.__init__ ran with the wrapped message; restore the cause's detail.
        self.reason = cause.reason
        self.tag = cause.tag
        self.field = cause.field


class TypeResolutionError(SchemaError):
    """A type name is neither declared in its package nor predeclared."""

    def __init__(self, name: str, package: str) -> None:
        self.name = name
        self.package = package
        super().__init__(f"undefined type {name!r} in package {package!r}")

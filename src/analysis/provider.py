"""
Source-analysis provider for a directory of Go files.

Loads one directory the way `go build` sees a package: every non-test `.go`
file, grouped by package clause. The loaded model answers the two questions
the schema translator asks: where is function X declared, and what does the
named type Y stand for.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from ..config import TranslatorConfig
from ..schema.errors import FunctionNotFound, ProviderError
from .data import CompilationUnit, FunctionDecl, ParsedFile
from .go_parser import GoParser
from .types import NamedType, TypeExpr, TypeIdentity, UnsupportedType, predeclared_type

logger = logging.getLogger(__name__)


class SourceAnalysisProvider:
    """
    Tree-sitter backed implementation of the TypeOracle protocol.

    Call `load()` once; afterwards the provider is read-only and may be
    shared between translations.
    """

    def __init__(
        self,
        directory: str | Path,
        config: Optional[TranslatorConfig] = None,
        parser: Optional[GoParser] = None,
    ) -> None:
        self.directory = Path(directory)
        self.config = config or TranslatorConfig()
        self.parser = parser or GoParser()
        self.units: list[CompilationUnit] = []
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def source_files(self) -> list[Path]:
        """List the Go files that belong to the package in `directory`."""
        files = []
        for path in sorted(self.directory.glob("*.go")):
            name = path.name
            if name.startswith((".", "_")):
                logger.debug(f"Skipping ignored file {path}")
                continue
            if name.endswith("_test.go") and not self.config.include_tests:
                logger.debug(f"Skipping test file {path}")
                continue
            if path.is_file():
                files.append(path)
        return files

    def load(self) -> "SourceAnalysisProvider":
        """Parse every source file and group the results into compilation units."""
        location = str(self.directory)
        if not self.directory.is_dir():
            raise ProviderError(location, [f"directory not found: {location}"])

        files = self.source_files()
        if not files:
            raise ProviderError(location, [f"no Go files in {location}"])

        parsed_files = [self.parser.parse_file(path) for path in files]
        errors = [err for parsed in parsed_files for err in parsed.parse_errors]
        if errors:
            raise ProviderError(location, errors)

        self.units = self.group_units(parsed_files)
        self._loaded = True
        logger.info(
            f"Loaded {len(files)} files from {location} into "
            f"{len(self.units)} package(s): {', '.join(u.package for u in self.units)}"
        )
        return self

    @staticmethod
    def group_units(parsed_files: Iterable[ParsedFile]) -> list[CompilationUnit]:
        units: dict[str, CompilationUnit] = {}
        for parsed in parsed_files:
            unit = units.get(parsed.package)
            if unit is None:
                unit = units[parsed.package] = CompilationUnit(package=parsed.package)
            unit.files.append(parsed)
        return list(units.values())

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    # ------------------------------------------------------------------
    # TypeOracle
    # ------------------------------------------------------------------

    def find_function(self, name: str) -> FunctionDecl:
        """
        Return the first top-level function named `name`.

        Units are scanned in load order, files in path order, declarations in
        source order. Later declarations with the same name are ignored.
        """
        self._ensure_loaded()
        matches = [
            fn
            for unit in self.units
            for fn in unit.iter_functions()
            if fn.name == name and (self.config.include_methods or not fn.is_method)
        ]
        if not matches:
            raise FunctionNotFound(name, str(self.directory))
        if len(matches) > 1:
            logger.debug(
                f"{len(matches)} declarations named {name!r}; using {matches[0].location}, "
                f"ignoring {', '.join(m.location for m in matches[1:])}"
            )
        return matches[0]

    def resolve_named(
        self, named: NamedType, package: str
    ) -> Optional[tuple[TypeIdentity, TypeExpr, str]]:
        """
        Resolve a named type reference as seen from `package`.

        Package-local declarations shadow predeclared identifiers. Generic
        declarations resolve to an unsupported leaf. Qualified references to
        other packages are not loaded and resolve to None, as do names with
        no declaration at all.
        """
        self._ensure_loaded()
        if named.qualified:
            return None

        unit = self._unit(package)
        decl = unit.find_type(named.name) if unit is not None else None
        if decl is not None:
            identity = (decl.package, decl.name)
            if decl.generic:
                return identity, UnsupportedType("generic_type", decl.name), decl.package
            return identity, decl.type, decl.package

        builtin = predeclared_type(named.name)
        if builtin is not None:
            return ("", named.name), builtin, package
        return None

    def _unit(self, package: str) -> Optional[CompilationUnit]:
        for unit in self.units:
            if unit.package == package:
                return unit
        return None

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Sequence


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass()
class TranslatorConfig:
    """Knobs for the Go-to-schema translation."""

    # Tag values (case-insensitive) that mark a struct field optional
    required_falsey_values: Sequence[str] = ("false", "no", "0")
    enum_tag_key: str = "enum"
    required_tag_key: str = "required"
    # Collapse a single-parameter list into that parameter's schema
    flatten_single_parameter: bool = True
    # Methods are top-level declarations too and may be looked up by name
    include_methods: bool = True
    include_tests: bool = False

    def is_falsey(self, value: str) -> bool:
        return value.strip().lower() in {v.lower() for v in self.required_falsey_values}


@dataclass()
class RuntimeConfig:
    """Global runtime settings for the go2schema CLI and entry point."""

    src_dir: Path = Path(".")
    output: str = "-"  # "-" writes to stdout
    log_level: LogLevel = "WARNING"
    indent: int = 2
    translator: TranslatorConfig = field(default_factory=TranslatorConfig)

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Build a config from GO2SCHEMA_* environment variables."""
        translator = TranslatorConfig(
            flatten_single_parameter=_env_flag("GO2SCHEMA_FLATTEN", True),
            include_methods=_env_flag("GO2SCHEMA_INCLUDE_METHODS", True),
            include_tests=_env_flag("GO2SCHEMA_INCLUDE_TESTS", False),
        )
        return cls(
            src_dir=Path(os.environ.get("GO2SCHEMA_SRC", ".")),
            output=os.environ.get("GO2SCHEMA_OUTPUT", "-"),
            log_level=os.environ.get("GO2SCHEMA_LOG_LEVEL", "WARNING").upper(),
            translator=translator,
        )

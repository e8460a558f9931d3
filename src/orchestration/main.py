from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from ..analysis.provider import SourceAnalysisProvider
from ..config import RuntimeConfig, TranslatorConfig
from ..schema.models import FunctionDetails
from ..schema.translator import SchemaTranslator
from ..storage.output import render_json, write_output

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Path, TranslatorConfig], SourceAnalysisProvider]


class FunctionSchemaGenerator:
    """
    High-level coordinator for go2schema.

    Responsibilities:
        * Load the source directory through the analysis provider.
        * Translate the requested function into FunctionDetails.
        * Render and write the JSON result.
    """

    def __init__(
        self,
        runtime_config: Optional[RuntimeConfig] = None,
        provider_factory: Optional[ProviderFactory] = None,
    ) -> None:
        self.runtime = runtime_config or RuntimeConfig()
        self.provider_factory = provider_factory or SourceAnalysisProvider

    def generate(self, func_name: str, src_dir: Optional[str | Path] = None) -> FunctionDetails:
        """Translate `func_name` from the Go package in `src_dir`."""
        directory = Path(src_dir) if src_dir is not None else self.runtime.src_dir
        config = self.runtime.translator

        provider = self.provider_factory(directory, config)
        provider.load()
        details = SchemaTranslator(provider, config).translate(func_name)
        logger.info(f"Generated schema for {details.name} from {directory}")
        return details

    def write(self, details: FunctionDetails) -> None:
        """Render `details` and write them to the configured output."""
        write_output(render_json(details, indent=self.runtime.indent), self.runtime.output)

    def run(self, func_name: str) -> FunctionDetails:
        """Generate the schema and write it to the configured output."""
        details = self.generate(func_name)
        self.write(details)
        return details


def parse_function(
    src_dir: str | Path,
    func_name: str,
    config: Optional[TranslatorConfig] = None,
) -> FunctionDetails:
    """
    Parse the Go package in `src_dir` and describe the function `func_name`.

    Raises:
        FunctionNotFound: no top-level function has that name
        ProviderError: the directory could not be loaded or parsed
        ParameterError: a parameter names an undefined type, or carries a
            malformed struct tag (then also a TagSyntaxError)

    Example:
        >>> details = parse_function("tests/testdata/sample_a", "NewWidgetFactory")
        >>> details.parameters.required
        ['FactoryName', 'Category', 'InventoryLevels', 'Operational']
    """
    runtime = RuntimeConfig(src_dir=Path(src_dir), translator=config or TranslatorConfig())
    return FunctionSchemaGenerator(runtime).generate(func_name)

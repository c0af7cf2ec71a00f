"""
Validation run coordinator.
Executes registered entity lists against the validation engine and renders the report.
"""

import time
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from rich.console import Console

from .config import ValidatorConfig
from .formatters import BaseFormatter, create_formatter
from .probes import AssetProbe, create_probe
from .processing.entities import EntityIterator
from .processing.progress import ProgressReporter, RichProgressReporter
from .processing.validator import AssetValidator
from .registry import EntityListSpec, ValidationRegistry, load_registry


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class EntityListResult:
    """Outcome of checking one entity list."""
    name: str
    source: str
    rows: int
    checks: int
    messages: int
    duration: float


@dataclass
class RunSummary:
    """Summary of a complete validation run."""
    entity_lists: List[EntityListResult] = field(default_factory=list)
    messages_by_kind: Dict[str, int] = field(default_factory=dict)
    duration: float = 0.0
    validations_file: Optional[str] = None
    report_path: Optional[str] = None

    @property
    def total_rows(self) -> int:
        return sum(result.rows for result in self.entity_lists)

    @property
    def total_checks(self) -> int:
        return sum(result.checks for result in self.entity_lists)

    @property
    def total_messages(self) -> int:
        return sum(self.messages_by_kind.values())

    @property
    def has_problems(self) -> bool:
        return self.total_messages > 0


def setup_logging(level: Union[str, int] = logging.WARNING) -> logging.Logger:
    """Set up the package logger once."""
    logger = logging.getLogger("asset_validator")
    logger.setLevel(level if isinstance(level, int) else level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


class ValidationRunner:
    """
    Runs every registered entity list through the validation engine.

    Messages go to the formatter while checks run; the formatter renders them
    once after the last list. Errors reading sources, probing images or writing
    the report are not recovered and leave the report unrendered.
    """

    def __init__(
        self,
        config: ValidatorConfig,
        formatter: BaseFormatter,
        probe: Optional[AssetProbe] = None,
        progress: Optional[ProgressReporter] = None,
    ):
        self.config = config
        self.formatter = formatter
        self.probe = probe or create_probe(config.probe)
        self.progress = progress or ProgressReporter()
        self.logger = logging.getLogger("asset_validator.runner")

    def run(self, registry: ValidationRegistry) -> RunSummary:
        """
        Validate all entity lists of a registry and output the report.

        Returns:
            RunSummary of the run
        """
        summary = RunSummary()
        start_time = time.time()

        validator = AssetValidator(
            sink=self.formatter,
            probe=self.probe,
            root=self.config.root_path,
            iterator=EntityIterator(progress=self.progress),
        )

        self.logger.info(f"Validating {len(registry)} entity lists with {self.probe.name} probe")

        try:
            for spec in registry:
                summary.entity_lists.append(self._run_entity_list(validator, spec))
        finally:
            self.progress.close()

        output = self.formatter.output()
        if isinstance(output, Path):
            summary.report_path = str(output)

        summary.messages_by_kind = self.formatter.messages.count_by_kind()
        summary.duration = time.time() - start_time
        self.logger.info(f"Validation finished with {summary.total_messages} problems in {summary.duration:.2f}s")
        return summary

    def _run_entity_list(self, validator: AssetValidator, spec: EntityListSpec) -> EntityListResult:
        start_time = time.time()
        checks_before = validator.checks_run
        messages_before = self.formatter.messages.total

        rows = validator.entity_list(spec.name, spec.source, spec.run_checks)

        result = EntityListResult(
            name=spec.name,
            source=spec.source,
            rows=rows,
            checks=validator.checks_run - checks_before,
            messages=self.formatter.messages.total - messages_before,
            duration=time.time() - start_time,
        )
        self.logger.info(
            f"{spec.name}: {result.rows} rows, {result.checks} checks, "
            f"{result.messages} problems in {result.duration:.2f}s"
        )
        return result


def run(
    output_format: Optional[str] = None,
    config: Optional[ValidatorConfig] = None,
    console: Optional[Console] = None,
    probe: Optional[AssetProbe] = None,
) -> RunSummary:
    """
    Run the full validation suite.

    Loads the validations file (config/asset_validations.toml by default) if
    present, checks every entity list and renders the report in the requested
    format ('simple', 'html' or 'json').

    Usage:
        from asset_validator import run
        run("html")
    """
    config = config or ValidatorConfig.default()
    setup_logging(config.log_level)

    formatter = create_formatter(
        output_format or config.output_format,
        console=console,
        report_path=config.report_path,
        template_dir=config.template_dir,
    )

    validations_file = config.find_validations_file()
    if validations_file is not None:
        registry = load_registry(validations_file)
    else:
        logging.getLogger("asset_validator.runner").info("No validations file found, nothing to check")
        registry = ValidationRegistry()

    progress = RichProgressReporter() if config.show_progress else None
    runner = ValidationRunner(config, formatter, probe=probe, progress=progress)
    summary = runner.run(registry)
    summary.validations_file = str(validations_file) if validations_file else None
    return summary

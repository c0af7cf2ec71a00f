"""
Formatters rendering collected validation messages.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from rich.console import Console

from .base import BaseFormatter, ReportError
from .console import ConsoleFormatter
from .html import HtmlFormatter, DEFAULT_REPORT_FILE
from .structured import JsonFormatter


class OutputFormat(str, Enum):
    """Available output formats."""
    SIMPLE = "simple"
    HTML = "html"
    JSON = "json"


def create_formatter(
    output_format: Union[str, OutputFormat] = OutputFormat.SIMPLE,
    console: Optional[Console] = None,
    report_path: Union[str, Path] = DEFAULT_REPORT_FILE,
    template_dir: Optional[Union[str, Path]] = None,
) -> BaseFormatter:
    """
    Create the formatter for an output format.

    Raises:
        ValueError: If the format is unknown
    """
    try:
        output_format = OutputFormat(output_format)
    except ValueError:
        available = ", ".join(f.value for f in OutputFormat)
        raise ValueError(f"Unknown output format: {output_format}. Available formats: {available}")

    if output_format is OutputFormat.HTML:
        return HtmlFormatter(report_path=report_path, template_dir=template_dir)
    if output_format is OutputFormat.JSON:
        return JsonFormatter(console=console)
    return ConsoleFormatter(console=console)


__all__ = [
    "BaseFormatter",
    "ReportError",
    "ConsoleFormatter",
    "HtmlFormatter",
    "JsonFormatter",
    "OutputFormat",
    "create_formatter",
]

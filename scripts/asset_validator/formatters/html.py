"""
HTML report formatter.

Writes a single HTML file, asset_validation.html in the project root by default.
The template for this formatter is templates/asset_validation.html.j2.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from ..processing.messages import MessageCollector, MessageKind
from .base import BaseFormatter, ReportError


logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "asset_validation.html.j2"
DEFAULT_REPORT_FILE = "asset_validation.html"


class HtmlFormatter(BaseFormatter):
    """Renders all collected messages through a Jinja2 template into one report file."""

    name = "html"

    def __init__(
        self,
        report_path: Union[str, Path] = DEFAULT_REPORT_FILE,
        template_dir: Optional[Union[str, Path]] = None,
        template_name: str = DEFAULT_TEMPLATE,
        collector: Optional[MessageCollector] = None,
    ):
        """
        Initialize HTML formatter.

        Args:
            report_path: File the report is written to, overwritten on every run
            template_dir: Directory containing Jinja2 templates
            template_name: Template file inside template_dir
            collector: Message collector to render, a new one if omitted
        """
        super().__init__(collector)
        if template_dir is None:
            template_dir = Path(__file__).parent.parent / "templates"

        self.report_path = Path(report_path)
        self.template_dir = Path(template_dir)
        self.template_name = template_name

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self) -> str:
        """Render the report to a string."""
        try:
            template = self.env.get_template(self.template_name)
            return template.render(
                messages=self.messages.as_dict(),
                counts=self.messages.count_by_kind(),
                total=self.messages.total,
                kinds=[kind.value for kind in MessageKind],
                generated_at=datetime.now().isoformat(timespec="seconds"),
            )
        except TemplateError as e:
            raise ReportError(f"Cannot render template '{self.template_name}': {e}") from e

    def output(self) -> Path:
        html = self.render()
        try:
            self.report_path.parent.mkdir(parents=True, exist_ok=True)
            self.report_path.write_text(html, encoding="utf-8")
        except OSError as e:
            raise ReportError(f"Cannot write report '{self.report_path}': {e}") from e

        logger.info(f"Wrote validation report to {self.report_path}")
        return self.report_path

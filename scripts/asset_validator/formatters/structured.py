"""
Machine-readable JSON formatter.
"""

import json
from typing import Any, Dict, Optional

from rich.console import Console

from ..processing.messages import MessageCollector
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Prints the message map and per-kind totals as a JSON document."""

    name = "json"

    def __init__(self, console: Optional[Console] = None, collector: Optional[MessageCollector] = None, indent: int = 2):
        super().__init__(collector)
        self.console = console or Console()
        self.indent = indent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": self.messages.as_dict(),
            "summary": {
                "total": self.messages.total,
                **self.messages.count_by_kind(),
            },
        }

    def output(self) -> None:
        self.console.out(json.dumps(self.to_dict(), indent=self.indent), highlight=False)

"""
Plain text console formatter with colorful output. This is the default formatter.
"""

from typing import Optional

from rich.console import Console
from rich.text import Text

from ..processing.messages import MessageCollector, MessageKind
from .base import BaseFormatter


KIND_STYLES = {
    MessageKind.MISSING: "red",
    MessageKind.INVALID: "yellow",
}

SEPARATOR = "-----------------------------------"


class ConsoleFormatter(BaseFormatter):
    """Prints one block per entity: a problem count header followed by its messages."""

    name = "simple"

    def __init__(self, console: Optional[Console] = None, collector: Optional[MessageCollector] = None):
        super().__init__(collector)
        self.console = console or Console()

    def output(self) -> None:
        for entity, messages in self.messages.items():
            self.console.print(Text(f"Found {len(messages)} problems for {entity}", style="bold"))
            for message in messages:
                # Text keeps brackets in paths from being read as markup
                line = Text.assemble(
                    (message.kind.value.upper(), KIND_STYLES.get(message.kind, "yellow")),
                    " ",
                    message.path,
                    " ",
                    message.description,
                )
                self.console.print(line, soft_wrap=True)
        self.console.print(SEPARATOR)

"""
Base class for formatters.

A formatter collects validation messages while checks run and renders them
once all entity lists have been processed. Every formatter responds to:
* add_message(entity, kind, path, description)
* output()
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..processing.messages import MessageCollector


class ReportError(Exception):
    """Raised when a report cannot be rendered or written."""


class BaseFormatter(ABC):
    """Stores messages in a MessageCollector; subclasses decide how to render them."""

    name = "base"

    def __init__(self, collector: Optional[MessageCollector] = None):
        self.messages = collector if collector is not None else MessageCollector()

    def add_message(self, entity: str, kind, path, description: str = "") -> None:
        self.messages.add(entity, kind, path, description)

    @abstractmethod
    def output(self):
        """Render the collected messages."""
        pass

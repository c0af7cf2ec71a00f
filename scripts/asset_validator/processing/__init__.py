"""
Validation processing: entity iteration, asset checks and message collection.
"""

from .entities import EntityIterator, EntitySourceError, filter_lines, parse_rows
from .messages import MessageCollector, MessageKind, ValidationMessage
from .progress import ProgressReporter, NullProgressReporter, RichProgressReporter
from .validator import (
    AssetValidator,
    CheckRequest,
    EntityContext,
    PathScope,
    ScopeClosedError,
    IMAGE_TYPES,
)

__all__ = [
    "EntityIterator",
    "EntitySourceError",
    "filter_lines",
    "parse_rows",
    "MessageCollector",
    "MessageKind",
    "ValidationMessage",
    "ProgressReporter",
    "NullProgressReporter",
    "RichProgressReporter",
    "AssetValidator",
    "CheckRequest",
    "EntityContext",
    "PathScope",
    "ScopeClosedError",
    "IMAGE_TYPES",
]

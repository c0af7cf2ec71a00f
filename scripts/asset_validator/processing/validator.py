"""
Asset validation engine.

Checks declared assets for existence and, for GIF, JPG and PNG images, compares
the probed type, dimension and file size against the declared expectations.
Problems are reported to a message sink (a formatter) instead of being raised.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional, Protocol, Union

from ..probes.base import AssetProbe
from .entities import EntityIterator, Row
from .messages import MessageKind


logger = logging.getLogger(__name__)

IMAGE_TYPES = frozenset({"GIF", "JPG", "PNG"})


class MessageSink(Protocol):
    def add_message(self, entity: str, kind, path, description: str = "") -> None:
        ...


class ScopeClosedError(RuntimeError):
    """Raised when a path scope is used after its block has exited."""


@dataclass(frozen=True)
class CheckRequest:
    """A single asset check: file name plus optional dimension and size limit."""
    file_name: str
    dimension: Optional[str] = None
    max_size: int = 0

    def __post_init__(self):
        if self.max_size < 0:
            raise ValueError(f"max_size cannot be negative, got {self.max_size}")

    @property
    def extension(self) -> str:
        return Path(self.file_name).suffix[1:].upper()


def format_kb(size_bytes: int) -> str:
    return f"{size_bytes / 1024.0:.2f}kB"


class AssetValidator:
    """Runs asset checks and reports problems to a message sink."""

    def __init__(
        self,
        sink: MessageSink,
        probe: AssetProbe,
        root: Union[str, Path] = ".",
        iterator: Optional[EntityIterator] = None,
    ):
        """
        Initialize validator.

        Args:
            sink: Receiver of validation messages, usually a formatter
            probe: Image metadata probe
            root: Project root that base paths and sources are relative to
            iterator: Entity iterator, created with silent progress if omitted
        """
        self.sink = sink
        self.probe = probe
        self.root = Path(root)
        self.iterator = iterator or EntityIterator()
        self.checks_run = 0

    def resolve(self, base_path: Union[str, Path, None], file_name: str) -> Path:
        base = self.root if base_path is None else self.root / base_path
        return base / file_name

    def validate(self, entity: str, base_path: Union[str, Path, None], request: CheckRequest) -> None:
        """
        Check one asset of an entity.

        A missing file yields exactly one 'missing' message and nothing else.
        Existing images are probed and may yield 'invalid' messages for
        dimension, type and size, in that order. Other file types are only
        checked for existence.
        """
        self.checks_run += 1
        path = self.resolve(base_path, request.file_name)

        if not path.exists():
            logger.debug(f"{entity}: missing {path}")
            self.sink.add_message(entity, MessageKind.MISSING, path)
            return

        extension = request.extension
        if extension not in IMAGE_TYPES:
            return

        observed = self.probe.probe(path)

        # An unset dimension means no dimension check
        if request.dimension and observed.dimension != request.dimension:
            self.sink.add_message(
                entity, MessageKind.INVALID, path,
                f"Dimension should be {request.dimension} but it was {observed.dimension}",
            )

        if observed.type != extension:
            self.sink.add_message(
                entity, MessageKind.INVALID, path,
                f"Type should be {extension} but it was {observed.type}",
            )

        # The limit itself already counts as too large
        if request.max_size != 0 and request.max_size <= observed.size_bytes:
            self.sink.add_message(
                entity, MessageKind.INVALID, path,
                f"Size should be below {format_kb(request.max_size)} but was {format_kb(observed.size_bytes)}",
            )

    def entity_list(
        self,
        name: str,
        source: Union[str, Path],
        block: Callable[[Row, "EntityContext"], None],
    ) -> int:
        """
        Iterate the rows of an entity list and run block(row, entity) for each.

        Returns:
            Number of rows processed
        """
        entity = EntityContext(self, name)
        return self.iterator.iterate(name, self.root / source, lambda row: block(row, entity))


class EntityContext:
    """Handle for the entity list currently being checked."""

    def __init__(self, validator: AssetValidator, name: str):
        self.validator = validator
        self.name = name

    @contextmanager
    def on_path(self, base_path: Union[str, Path]) -> Iterator["PathScope"]:
        """Scope file lookups to base_path; the scope is closed when the block exits."""
        scope = PathScope(self.validator, self.name, base_path)
        try:
            yield scope
        finally:
            scope.close()

    def __repr__(self) -> str:
        return f"EntityContext({self.name!r})"


class PathScope:
    """Validates files relative to one base path of one entity."""

    def __init__(self, validator: AssetValidator, entity: str, base_path: Union[str, Path]):
        self.validator = validator
        self.entity = entity
        self.base_path: Optional[Path] = Path(base_path)

    @property
    def closed(self) -> bool:
        return self.base_path is None

    def close(self) -> None:
        self.base_path = None

    def validate(self, file_name: str, dimension: Optional[str] = None, max_size: int = 0) -> None:
        """
        Run validations on a single file.

        Args:
            file_name: File name with extension, relative to the base path
            dimension: Required '<WIDTH>x<HEIGHT>' dimension, such as '40x120'
            max_size: Maximum allowed file size in bytes, 0 disables the check
        """
        if self.closed:
            raise ScopeClosedError(f"Path scope for {self.entity} is closed")
        self.validator.validate(self.entity, self.base_path, CheckRequest(file_name, dimension, max_size))

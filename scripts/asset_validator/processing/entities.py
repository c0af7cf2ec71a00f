"""
Entity list iteration over CSV seed files.
"""

import csv
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .progress import ProgressReporter


logger = logging.getLogger(__name__)

Row = Dict[str, str]


class EntitySourceError(Exception):
    """Raised when an entity list source cannot be read or parsed."""

    def __init__(self, message: str, source: Union[str, Path, None] = None):
        super().__init__(message)
        self.source = str(source) if source is not None else None


def is_skipped_line(line: str) -> bool:
    """True for comment lines (plain or quoted '#') and whitespace-only lines."""
    stripped = line.strip()
    return not stripped or stripped.startswith("#") or stripped.startswith('"#')


def filter_lines(text: str) -> List[str]:
    """Split text into lines and drop comments and blank lines, keeping order."""
    return [line for line in text.splitlines() if not is_skipped_line(line)]


def parse_rows(text: str) -> List[Row]:
    """Parse CSV text with a header row into a list of rows keyed by header name."""
    lines = filter_lines(text)
    if not lines:
        return []
    try:
        reader = csv.DictReader(lines)
        return [dict(row) for row in reader]
    except csv.Error as e:
        raise EntitySourceError(f"Malformed CSV data: {e}") from e


class EntityIterator:
    """Reads entity lists and hands each row to a check routine."""

    def __init__(self, progress: Optional[ProgressReporter] = None, encoding: str = "utf-8"):
        self.progress = progress or ProgressReporter()
        self.encoding = encoding

    def read_rows(self, source: Union[str, Path]) -> List[Row]:
        """
        Read all data rows of a CSV source.

        Raises:
            EntitySourceError: If the file cannot be read or parsed
        """
        source = Path(source)
        try:
            text = source.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise EntitySourceError(f"Cannot read entity list '{source}': {e}", source) from e

        try:
            return parse_rows(text)
        except EntitySourceError as e:
            raise EntitySourceError(f"{e} in '{source}'", source) from e

    def iterate(self, name: str, source: Union[str, Path], block: Callable[[Row], None]) -> int:
        """
        Call block once per data row in source order, reporting progress.

        Args:
            name: Entity list name used for progress reporting
            source: CSV file path
            block: Check routine invoked with each row

        Returns:
            Number of rows processed
        """
        rows = self.read_rows(source)
        count = len(rows)
        logger.info(f"Checking {count} {name} entries from {source}")

        self.progress.start(name, count)
        for processed, row in enumerate(rows, start=1):
            block(row)
            self.progress.update(name, processed / count * 100)
        self.progress.finish(name)

        return count

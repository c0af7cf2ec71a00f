"""
Abstract base classes for asset probes.
Defines the interface used by the validation engine to read image metadata.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Union


# Format names reported by image libraries that differ from file extensions
FORMAT_ALIASES = {
    "JPEG": "JPG",
}


def normalize_format(name: str) -> str:
    """Upper-case a format name and map it onto its file-extension spelling."""
    name = (name or "").strip().upper()
    return FORMAT_ALIASES.get(name, name)


def format_dimension(width: int, height: int) -> str:
    """Render a size as the '<WIDTH>x<HEIGHT>' string used in checks."""
    return f"{width}x{height}"


@dataclass(frozen=True)
class ProbeResult:
    """Observed metadata of an image file."""
    type: str
    dimension: str
    size_bytes: int

    def __post_init__(self):
        if self.size_bytes < 0:
            raise ValueError(f"size_bytes cannot be negative, got {self.size_bytes}")


class ProbeError(Exception):
    """Raised when an asset cannot be probed."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None


class AssetProbe(ABC):
    """Abstract base class for image metadata probes."""

    name = "abstract"

    @abstractmethod
    def probe(self, path: Union[str, Path]) -> ProbeResult:
        """
        Read type, dimension and byte size of an image file.

        Args:
            path: Path of an existing image file

        Returns:
            ProbeResult with the observed metadata

        Raises:
            ProbeError: If the file cannot be read as an image
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class StaticProbe(AssetProbe):
    """Probe returning the same fixed result for every file."""

    name = "static"

    def __init__(self, type: str, dimension: str, size_bytes: int):
        self.result = ProbeResult(normalize_format(type), dimension, int(size_bytes))
        self.calls = []

    def probe(self, path: Union[str, Path]) -> ProbeResult:
        self.calls.append(str(path))
        return self.result

"""
Pillow based image probe.
"""

import os
import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from .base import AssetProbe, ProbeResult, ProbeError, normalize_format, format_dimension


logger = logging.getLogger(__name__)


class PillowProbe(AssetProbe):
    """Reads image headers with Pillow; the byte size comes from the filesystem."""

    name = "pillow"

    def probe(self, path: Union[str, Path]) -> ProbeResult:
        path = Path(path)
        try:
            # Only the header is parsed, pixel data is never decoded
            with Image.open(path) as image:
                image_format = image.format
                width, height = image.size
            size_bytes = os.path.getsize(path)
        except (UnidentifiedImageError, OSError) as e:
            raise ProbeError(f"Cannot probe image '{path}': {e}", path) from e

        if not image_format:
            raise ProbeError(f"Cannot determine image format of '{path}'", path)

        result = ProbeResult(
            type=normalize_format(image_format),
            dimension=format_dimension(width, height),
            size_bytes=size_bytes,
        )
        logger.debug(f"Probed {path}: {result}")
        return result

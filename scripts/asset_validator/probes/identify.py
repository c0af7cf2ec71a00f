"""
ImageMagick `identify` based image probe.
"""

import subprocess
import logging
from pathlib import Path
from typing import List, Optional, Union

from .base import AssetProbe, ProbeResult, ProbeError, normalize_format


logger = logging.getLogger(__name__)

# One line per frame
IDENTIFY_FORMAT = "%m %wx%h %b\\n"


class IdentifyProbe(AssetProbe):
    """
    Shells out to ImageMagick's identify tool.

    The tool prints one line per frame with '<TYPE> <WIDTH>x<HEIGHT> <SIZE><UNIT>',
    e.g. 'PNG 60x60 2048B'; only the first frame is used.
    """

    name = "identify"

    def __init__(self, executable: str = "identify", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def _command(self, path: Path) -> List[str]:
        return [self.executable, "-format", IDENTIFY_FORMAT, str(path)]

    def probe(self, path: Union[str, Path]) -> ProbeResult:
        path = Path(path)
        try:
            completed = subprocess.run(
                self._command(path),
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ProbeError(f"'{self.executable}' not found, is ImageMagick installed?", path) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ProbeError(f"identify failed for '{path}' (exit {e.returncode}): {stderr}", path) from e
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"identify timed out for '{path}'", path) from e

        return self.parse_output(completed.stdout, path)

    @staticmethod
    def parse_output(output: str, path: Union[str, Path, None] = None) -> ProbeResult:
        """Parse identify output into a ProbeResult."""
        lines = (output or "").strip().splitlines()
        tokens = lines[0].split() if lines else []
        if len(tokens) < 3:
            raise ProbeError(f"Unexpected identify output: {output!r}", path)

        image_type, dimension, size = tokens[:3]

        # Size carries a trailing unit character, e.g. '2048B'
        try:
            size_bytes = int(float(size[:-1]))
        except ValueError as e:
            raise ProbeError(f"Unexpected identify size token: {size!r}", path) from e

        return ProbeResult(
            type=normalize_format(image_type),
            dimension=dimension,
            size_bytes=size_bytes,
        )

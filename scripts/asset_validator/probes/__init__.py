"""
Image probes reading type, dimension and size of asset files.
"""

from .base import AssetProbe, ProbeResult, ProbeError, StaticProbe, normalize_format
from .pillow import PillowProbe
from .identify import IdentifyProbe


PROBES = {
    PillowProbe.name: PillowProbe,
    IdentifyProbe.name: IdentifyProbe,
}


def create_probe(name: str = "pillow", **kwargs) -> AssetProbe:
    """
    Create a probe by name.

    Args:
        name: 'pillow' or 'identify'
        **kwargs: Passed to the probe constructor

    Raises:
        ValueError: If the probe name is unknown
    """
    key = (name or "").strip().lower()
    if key not in PROBES:
        raise ValueError(f"Unknown probe: {name}. Available probes: {', '.join(sorted(PROBES))}")
    return PROBES[key](**kwargs)


__all__ = [
    "AssetProbe",
    "ProbeResult",
    "ProbeError",
    "StaticProbe",
    "PillowProbe",
    "IdentifyProbe",
    "create_probe",
    "normalize_format",
]

"""
Asset Validator

Audits media assets referenced by CSV entity lists against expected existence,
type, dimension and file size, and reports problems on the console, as JSON,
or as an HTML report. Meant as an offline quality gate before deploying content.
"""

__version__ = "0.1.0"

from .config import ValidatorConfig, ConfigurationError
from .registry import ValidationRegistry, load_registry
from .runner import ValidationRunner, RunSummary, run
from .probes import AssetProbe, ProbeResult, ProbeError, create_probe
from .processing.validator import AssetValidator, CheckRequest
from .processing.messages import MessageCollector, MessageKind, ValidationMessage
from .formatters import OutputFormat, create_formatter

__all__ = [
    "ValidatorConfig",
    "ConfigurationError",
    "ValidationRegistry",
    "load_registry",
    "ValidationRunner",
    "RunSummary",
    "run",
    "AssetProbe",
    "ProbeResult",
    "ProbeError",
    "create_probe",
    "AssetValidator",
    "CheckRequest",
    "MessageCollector",
    "MessageKind",
    "ValidationMessage",
    "OutputFormat",
    "create_formatter",
]

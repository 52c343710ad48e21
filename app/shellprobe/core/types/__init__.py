"""
Public API for shellprobe's value types.
"""

from .base import CanonicalModel
from .probe import (
    HealthReport,
    ProbeConfig,
    ProbeResult,
)

__all__ = [
    "CanonicalModel",
    "HealthReport",
    "ProbeConfig",
    "ProbeResult",
]

"""Command-driven HTTP health checks."""

from .health import HealthChecker
from .runner import ProbeRunner, ShellProbeRunner

__all__ = ["HealthChecker", "ProbeRunner", "ShellProbeRunner"]

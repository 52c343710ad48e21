"""Value types for probe configuration, probe outcomes and health reports.

All types are immutable. A `ProbeConfig` is built once at process start;
`ProbeResult` and `HealthReport` instances live for a single request.
"""

from typing import Optional

from pydantic import Field, model_validator

from .base import CanonicalModel


# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════

class ProbeConfig(CanonicalModel):
    """Process-wide probe configuration.

    Attributes:
        commands: Shell command lines that must all exit 0 for the service to
            be reported healthy, in evaluation order.
        version_command: Shell command whose output fills the version line.

    Example:
        >>> config = ProbeConfig(commands=("docker ps",), version_command="echo 1.0")
        >>> config.commands
        ('docker ps',)
    """
    commands: tuple[str, ...] = Field(
        default=(),
        description="Probe commands, evaluated in order."
    )

    version_command: str = Field(
        min_length=1,
        description="Command queried for the version line."
    )


# ═══════════════════════════════════════════════════════════════════════════
# PROBE OUTCOME
# ═══════════════════════════════════════════════════════════════════════════

class ProbeResult(CanonicalModel):
    """Outcome of running a single probe command.

    Attributes:
        command: The command line that was executed.
        succeeded: True when the command exited with status 0.
        output: Trimmed combined stdout/stderr text.
        error: Human readable failure description, only set on failure.

    Raises:
        ValueError: If `error` is inconsistent with `succeeded`.
    """
    command: str
    succeeded: bool
    output: str = ""
    error: Optional[str] = None

    @model_validator(mode='after')
    def validate_error_consistency(self) -> 'ProbeResult':
        if self.succeeded and self.error is not None:
            raise ValueError("A successful probe cannot carry an error")
        if not self.succeeded and not self.error:
            raise ValueError("A failed probe must carry an error")
        return self

    @classmethod
    def success(cls, command: str, output: str) -> 'ProbeResult':
        return cls(command=command, succeeded=True, output=output)

    @classmethod
    def failure(cls, command: str, output: str, error: str) -> 'ProbeResult':
        return cls(command=command, succeeded=False, output=output, error=error)


# ═══════════════════════════════════════════════════════════════════════════
# HEALTH REPORT
# ═══════════════════════════════════════════════════════════════════════════

class HealthReport(CanonicalModel):
    """Aggregated health state for one request.

    Attributes:
        healthy: True when every configured probe succeeded.
        version: Version probe output, or ``error:<output>`` if it failed.
        error_detail: Error of the first failing probe, if any.
    """
    healthy: bool
    version: str
    error_detail: Optional[str] = None

    def render(self) -> str:
        """Serialize the report to the plain-text response body.

        Returns:
            ``healthy:<bool>`` and ``version:<version>`` lines, followed by a
            blank line and ``Error: <detail>`` when the check failed.

        Example:
            >>> HealthReport(healthy=True, version="17.06.0-ce-rc4").render()
            'healthy:true\\nversion:17.06.0-ce-rc4\\n'
        """
        body = (
            f"healthy:{str(self.healthy).lower()}\n"
            f"version:{self.version}\n"
        )
        if self.error_detail is not None:
            body += f"\nError: {self.error_detail}"
        return body

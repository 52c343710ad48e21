"""Health evaluation over the configured probe commands."""

from app.shellprobe.core.logging_config import get_logger
from app.shellprobe.core.types import HealthReport, ProbeConfig, ProbeResult
from app.shellprobe.runner import ProbeRunner

logger = get_logger(__name__)


class HealthChecker:
    """Evaluate service health from a fixed, ordered list of probe commands.

    Commands run one after another and evaluation stops at the first failure.
    The version probe always runs, independently of the health outcome.

    Attributes:
        config: Immutable probe configuration.
        runner: Executes individual commands.
    """

    def __init__(self, config: ProbeConfig, runner: ProbeRunner) -> None:
        self.config = config
        self.runner = runner

    async def first_failure(self) -> ProbeResult | None:
        """Run the configured commands in order.

        Returns:
            The first failing `ProbeResult`, or None when every command
            succeeded (including when none are configured).
        """
        for command in self.config.commands:
            result = await self.runner.run(command)
            if not result.succeeded:
                return result
        return None

    async def version(self) -> str:
        """Query the version probe.

        Returns:
            The trimmed output, or ``error:<output>`` when the probe failed.
        """
        result = await self.runner.run(self.config.version_command)
        if not result.succeeded:
            return f"error:{result.output}"
        return result.output

    async def evaluate(self) -> HealthReport:
        """Build the health report for one request."""
        failure = await self.first_failure()
        version = await self.version()

        report = HealthReport(
            healthy=failure is None,
            version=version,
            error_detail=failure.error if failure is not None else None,
        )
        logger.info(
            "health_evaluated",
            healthy=report.healthy,
            failed_command=failure.command if failure is not None else None,
        )
        return report

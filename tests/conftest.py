"""Test configuration and shared fixtures.

Provide isolated settings, a scriptable fake probe runner, and HTTP client
factories. No fixture reads `.env` files or the real process arguments.
"""
import asyncio
from typing import Callable, Generator, Iterable, Optional

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.shellprobe.core.types import ProbeConfig, ProbeResult

# ==============================================================================
# ASYNC BACKEND
# ==============================================================================

@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"

# ==============================================================================
# CONFIGURATION FIXTURES
# ==============================================================================

@pytest.fixture
def mock_settings() -> Settings:
    """Provide isolated test configuration without external dependencies.

    Returns:
        Settings: Development settings with a short request budget and a
            version probe that does not depend on Docker.
    """
    return Settings(
        ENVIRONMENT="development",
        LOG_LEVEL="debug",
        REQUEST_TIMEOUT_SECONDS=1.0,
        VERSION_COMMAND="echo 17.06.0-ce-rc4",
        _env_file=None,  # Bypass local environment file
    )

# ==============================================================================
# FAKE RUNNER
# ==============================================================================

class FakeProbeRunner:
    """Deterministic stand-in for `ShellProbeRunner`.

    Commands listed in `failing` fail with ``exit status 1: <output>``; all
    others succeed. Output defaults to ``out:<command>`` unless overridden.
    Every executed command is recorded in `calls`.
    """

    def __init__(
        self,
        failing: Iterable[str] = (),
        outputs: Optional[dict[str, str]] = None,
        delay: float = 0.0,
    ) -> None:
        self.failing = set(failing)
        self.outputs = outputs or {}
        self.delay = delay
        self.calls: list[str] = []

    async def run(self, command: str) -> ProbeResult:
        self.calls.append(command)
        if self.delay:
            await asyncio.sleep(self.delay)
        output = self.outputs.get(command, f"out:{command}")
        if command in self.failing:
            return ProbeResult.failure(command, output, f"exit status 1: {output}")
        return ProbeResult.success(command, output)


@pytest.fixture
def fake_runner_factory() -> Callable[..., FakeProbeRunner]:
    return FakeProbeRunner

# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@pytest.fixture
def make_client(mock_settings: Settings) -> Generator[Callable[..., TestClient], None, None]:
    """Provide a factory for HTTP test clients bound to a probe configuration.

    The factory accepts the probe commands, an optional runner (a real shell
    runner is used when omitted) and optional settings overrides. Opened
    clients are closed after the test.

    Yields:
        Callable[..., TestClient]: Client factory.
    """
    clients: list[TestClient] = []

    def _make(
        commands: Iterable[str] = (),
        runner=None,
        version_command: Optional[str] = None,
        **overrides,
    ) -> TestClient:
        settings = mock_settings.model_copy(update=overrides) if overrides else mock_settings
        config = ProbeConfig(
            commands=tuple(commands),
            version_command=version_command or settings.VERSION_COMMAND,
        )
        client = TestClient(create_app(config, settings=settings, runner=runner))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)

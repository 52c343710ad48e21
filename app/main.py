"""FastAPI application entry point for the shellprobe health service.

Build the FastAPI application around an immutable `ProbeConfig`, register
middleware, and configure the lifespan. Confine side effects (logging
configuration) to the lifespan context manager. `main` is the process entry
point: every command-line argument is a probe command.
"""

import logging.config
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Sequence

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from app.api.middleware import RequestCorrelationMiddleware, RequestTimeoutMiddleware
from app.api.routing import AnyMethodRoute
from app.config import Settings, get_settings
from app.shellprobe.core.logging_config import (
    configure_structlog_wrapper,
    get_contextvars,
    get_logger,
    get_logging_config,
)
from app.shellprobe.core.types import ProbeConfig
from app.shellprobe.health import HealthChecker
from app.shellprobe.runner import ProbeRunner, ShellProbeRunner

# Registered methods only shape the route; AnyMethodRoute serves every method.
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def build_probe_config(commands: Sequence[str], settings: Settings) -> ProbeConfig:
    """Freeze the probe commands and version command into a `ProbeConfig`.

    Args:
        commands: Probe command lines, in evaluation order.
        settings: Application settings supplying the version command.

    Returns:
        ProbeConfig: Immutable configuration for the process lifetime.
    """
    return ProbeConfig(commands=tuple(commands), version_command=settings.VERSION_COMMAND)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle events.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control returns to the application after startup completes.
    """
    settings: Settings = app.state.settings

    logging.config.dictConfig(get_logging_config(settings))
    configure_structlog_wrapper(settings)

    logger = get_logger("lifespan")
    logger.info(
        "shellprobe_startup",
        env=settings.ENVIRONMENT,
        probe_count=len(app.state.probe_config.commands),
        version_command=app.state.probe_config.version_command,
    )

    yield

    logger.info("shellprobe_shutdown")


# ==============================================================================
# DEPENDENCY INJECTION
# ==============================================================================


def get_probe_config(request: Request) -> ProbeConfig:
    """Return the probe configuration attached to the running application."""
    return request.app.state.probe_config


def get_probe_runner(request: Request) -> ProbeRunner:
    """Return the probe runner attached to the running application."""
    return request.app.state.probe_runner


def get_health_checker(
    config: ProbeConfig = Depends(get_probe_config),
    runner: ProbeRunner = Depends(get_probe_runner),
) -> HealthChecker:
    return HealthChecker(config, runner)


# ==============================================================================
# ROUTES
# ==============================================================================


async def health(checker: HealthChecker = Depends(get_health_checker)) -> PlainTextResponse:
    """Report health derived from the configured probe commands.

    Always answers 200; health is signalled only through the body.

    Returns:
        PlainTextResponse: ``healthy:``/``version:`` lines and, on failure,
        an ``Error:`` block.
    """
    report = await checker.evaluate()
    return PlainTextResponse(report.render(), status_code=status.HTTP_200_OK)


async def global_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Handle unhandled exceptions globally.

    Log the error with its traceback and bound request context, and return a
    generic 500 body so internals are not leaked to the client.
    """
    logger = get_logger("exception_handler")
    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )
    # Runs outside RequestCorrelationMiddleware, so the header is set here.
    request_id = get_contextvars().get("request_id") or request.headers.get("X-Request-ID")
    return PlainTextResponse(
        "Internal Server Error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers={"X-Request-ID": request_id} if request_id else None,
    )


def create_app(
    probe_config: ProbeConfig,
    settings: Optional[Settings] = None,
    runner: Optional[ProbeRunner] = None,
) -> FastAPI:
    """Assemble the FastAPI application.

    Args:
        probe_config: Immutable probe configuration.
        settings: Application settings; defaults to `get_settings()`.
        runner: Probe runner; defaults to a `ShellProbeRunner` using
            ``settings.PROBE_SHELL``.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="HTTP health checks driven by shell probe commands",
        lifespan=lifespan,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.probe_config = probe_config
    app.state.probe_runner = runner or ShellProbeRunner(shell=settings.PROBE_SHELL)

    # Starlette wraps later additions around earlier ones: correlation runs
    # outermost so the timeout reply also carries X-Request-ID.
    app.add_middleware(
        RequestTimeoutMiddleware,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        message=settings.TIMEOUT_MESSAGE,
    )
    app.add_middleware(RequestCorrelationMiddleware)

    app.add_exception_handler(Exception, global_exception_handler)
    app.router.add_api_route(
        "/{path:path}",
        health,
        methods=ROUTE_METHODS,
        include_in_schema=False,
        route_class_override=AnyMethodRoute,
    )

    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Serve health checks for the probe commands given as arguments.

    Args:
        argv: Probe commands; defaults to ``sys.argv[1:]``.

    Returns:
        int: Process exit code (0 after a graceful shutdown).
    """
    commands = list(sys.argv[1:] if argv is None else argv)
    settings = get_settings()
    app = create_app(build_probe_config(commands, settings), settings=settings)

    uvicorn.run(
        app,
        host=settings.LISTEN_HOST,
        port=settings.LISTEN_PORT,
        log_config=None,
    )
    return 0

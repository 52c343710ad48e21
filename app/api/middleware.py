"""HTTP middleware for request correlation and request deadlines.

Provide middleware to manage request-scoped context variables (the Request
ID) and to bound every request with a fixed time budget.
"""

import asyncio
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.shellprobe.core.logging_config import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Manage request correlation IDs for log correlation.

    Ensure every request has a unique ID bound to the logging context via
    `structlog.contextvars`, so probe logs can be tied to the request that
    triggered them.
    """

    async def dispatch(self, request: Request, call_next):
        """Process the request and manage correlation context lifecycle.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or route handler in the chain.

        Returns:
            The HTTP response with the `X-Request-ID` header attached.
        """
        # Clear residual context from previous requests on this task.
        clear_contextvars()

        # Reuse an upstream Request ID (load balancer, orchestrator) if present.
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        bind_contextvars(request_id=request_id)

        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class RequestTimeoutMiddleware:
    """Bound each HTTP request with a deadline and substitute a fixed reply.

    The wrapped application's messages are buffered until it finishes, so a
    client sees either the complete normal response or the timeout reply,
    never a mix. When the deadline passes the application task is cancelled;
    probe runners kill their child processes on cancellation.

    Attributes:
        timeout: Budget in seconds for one request.
        message: Plain-text body sent when the budget is exceeded.
        status_code: Status sent with the timeout body.
    """

    def __init__(
        self,
        app: ASGIApp,
        timeout: float,
        message: str,
        status_code: int = 503,
    ) -> None:
        self.app = app
        self.timeout = timeout
        self.message = message
        self.status_code = status_code

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        buffered: list[Message] = []

        async def buffer_send(message: Message) -> None:
            buffered.append(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, buffer_send), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "request_timed_out",
                path=scope.get("path"),
                method=scope.get("method"),
                timeout=self.timeout,
            )
            response = PlainTextResponse(self.message, status_code=self.status_code)
            await response(scope, receive, send)
            return

        for message in buffered:
            await send(message)

"""Routing helpers for method-agnostic endpoints."""

from fastapi.routing import APIRoute
from starlette.routing import Match
from starlette.types import Receive, Scope, Send


class AnyMethodRoute(APIRoute):
    """An `APIRoute` that serves every HTTP method, including non-standard ones.

    Starlette reports a method mismatch as a partial match and answers it
    with 405; here only the path decides the match, and the method is never
    checked when handling.
    """

    def matches(self, scope: Scope) -> tuple[Match, Scope]:
        match, child_scope = super().matches(scope)
        if match == Match.PARTIAL:
            match = Match.FULL
        return match, child_scope

    async def handle(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.app(scope, receive, send)

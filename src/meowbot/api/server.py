"""FastAPI trigger endpoints for the agents.

- GET|POST /api/send/reply - Reply to new messages (``test=true`` forces a reply)
- GET|POST /api/send/roast - Goal check-in
- GET /api/state - Read-only view of the source window and memory
- GET|POST /health - Liveness and current mood (no auth required)

Every protected endpoint takes the static key as the ``api_key`` query
parameter. A mismatch returns 401 before any side effect.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..clock import local_now
from ..config import Settings
from ..context import mood_for
from ..errors import GenerationError

if TYPE_CHECKING:
    from ..agents import ProactiveAgent, ReactiveAgent

logger = logging.getLogger(__name__)

StateReader = Callable[[], Awaitable[dict[str, Any]]]

TRUE_VALUES = ("1", "true", "yes")


def _check_api_key(provided: str | None, expected: str | None) -> bool:
    """Validate the static trigger key."""
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided, expected)


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


def create_app(
    settings: Settings,
    reactive: ReactiveAgent | None = None,
    proactive: ProactiveAgent | None = None,
    state_reader: StateReader | None = None,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Loaded settings; supplies the API key and clock offset.
        reactive: Agent behind /api/send/reply.
        proactive: Agent behind /api/send/roast.
        state_reader: Coroutine function behind /api/state.
        on_shutdown: Coroutine function awaited when the server stops.

    Returns:
        FastAPI application instance
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("meowbot API starting")
        yield
        if on_shutdown is not None:
            await on_shutdown()
        logger.info("meowbot API shutting down")

    app = FastAPI(
        title="meowbot",
        description="Trigger endpoints for the meowbot chat agents",
        version="0.1.0",
        lifespan=lifespan,
    )

    def authorized(request: Request) -> bool:
        return _check_api_key(request.query_params.get("api_key"), settings.api_key)

    async def run_guarded(name: str, call: Callable[[], Awaitable[dict[str, Any]]]) -> Any:
        try:
            return await call()
        except GenerationError as e:
            logger.exception(f"{name} failed at generation")
            return _error(502, f"Generation failed: {e}")
        except Exception as e:
            logger.exception(f"{name} failed")
            return _error(500, f"Internal error: {e}")

    @app.api_route("/health", methods=["GET", "POST"], tags=["health"])
    async def health() -> dict[str, Any]:
        """Health check endpoint (no auth required)."""
        moment = local_now(settings.utc_offset_hours)
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "mood_context": mood_for(moment).to_dict(),
        }

    @app.api_route("/api/send/reply", methods=["GET", "POST"], tags=["agents"])
    async def send_reply(request: Request) -> Any:
        """Reply to messages posted since the agent last spoke."""
        if not authorized(request):
            return _error(401, "Unauthorized")
        if reactive is None:
            return _error(503, "Reactive agent not configured")

        force = request.query_params.get("test", "").lower() in TRUE_VALUES

        async def call() -> dict[str, Any]:
            summary = await reactive.run(force=force)
            return summary.to_dict()

        return await run_guarded("reply", call)

    @app.api_route("/api/send/roast", methods=["GET", "POST"], tags=["agents"])
    async def send_roast(request: Request) -> Any:
        """Run the goal check-in."""
        if not authorized(request):
            return _error(401, "Unauthorized")
        if proactive is None:
            return _error(503, "Proactive agent not configured")

        async def call() -> dict[str, Any]:
            summary = await proactive.run()
            return summary.to_dict()

        return await run_guarded("roast", call)

    @app.get("/api/state", tags=["debug"])
    async def state(request: Request) -> Any:
        """Read-only debug view of the source window and memory."""
        if not authorized(request):
            return _error(401, "Unauthorized")
        if state_reader is None:
            return _error(503, "State reader not configured")

        async def call() -> dict[str, Any]:
            return {"success": True, **(await state_reader())}

        return await run_guarded("state", call)

    return app


def run_server(settings: Settings) -> None:
    """Run the trigger server.

    This is a blocking call that runs the server until interrupted.
    """
    import uvicorn

    from ..runtime import Runtime

    runtime = Runtime(settings)
    app = create_app(
        settings,
        reactive=runtime.reactive,
        proactive=runtime.proactive,
        state_reader=runtime.state,
        on_shutdown=runtime.close,
    )

    logger.info(f"Starting meowbot on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")

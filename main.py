import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.domain.exceptions import NotificationPersistenceError
from app.domain.ports import IdentityVerifier, NotificationStore
from app.interfaces.api.container import NotificationContainer, build_container
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the retention sweep on startup and release resources on shutdown."""

    container: NotificationContainer = app.state.container
    cleanup: asyncio.Task | None = None
    if container.cleanup_task is not None:
        cleanup = asyncio.create_task(container.cleanup_task.run_forever())
    try:
        yield
    finally:
        if cleanup is not None:
            cleanup.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await cleanup
        container.dispose()


async def _persistence_error_handler(
    request: Request, exc: NotificationPersistenceError
) -> JSONResponse:
    logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Notification store unavailable"},
    )


def create_app(
    settings: Settings | None = None,
    *,
    store: NotificationStore | None = None,
    verifier: IdentityVerifier | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or get_settings()
    app = FastAPI(title="Realtime Notifications API", lifespan=lifespan)
    app.state.container = build_container(settings, store=store, verifier=verifier)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(NotificationPersistenceError, _persistence_error_handler)

    register_routes(app)
    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("main:create_app", factory=True, host="0.0.0.0", port=8000)

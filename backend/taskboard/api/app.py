"""
FastAPI Application

Main entry point for the API.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .. import __version__
from ..config.logging import get_logger, request_id_var
from ..config.settings import Settings
from ..context import AppContext
from ..errors import TaskError, TaskValidationError
from .channel import router as channel_router
from .models import HealthResponse
from .tasks import router as tasks_router

logger = get_logger("api")

ROOT_MESSAGE = "Task Management API Running..."


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every incoming HTTP request with method, path, status and duration.
    Generates X-Request-ID for log correlation across the request lifecycle."""

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = uuid.uuid4().hex[:8]
        request.state.request_id = req_id
        token = request_id_var.set(req_id)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        response.headers["X-Request-ID"] = req_id

        logger.info(
            "%s %s -> %d [%.1fms]",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={"extra_data": {
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }}
        )
        return response


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create FastAPI application."""
    if settings is None:
        from ..config.settings import settings as default_settings
        settings = default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the store and the subscriber hub for the process lifetime."""
        app.state.context = AppContext.start(settings)
        logger.info("Taskboard API started (env=%s)", settings.app_env)

        yield

        app.state.context.close()
        app.state.context = None

    app = FastAPI(
        title="Taskboard API",
        description="Realtime task tracking: REST CRUD with WebSocket broadcast",
        version=__version__,
        lifespan=lifespan,
    )

    # Request logging (outermost - added first, runs last in LIFO stack)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.include_router(tasks_router)
    app.include_router(channel_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return ROOT_MESSAGE

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request):
        checks = {}
        context: Optional[AppContext] = getattr(request.app.state, "context", None)

        try:
            checks["tasks"] = context.store.count()
            checks["db"] = "ok"
        except Exception:
            checks["db"] = "error"

        checks["subscribers"] = context.hub.count if context else 0

        overall = "ok" if checks.get("db") == "ok" else "degraded"
        return HealthResponse(status=overall, checks=checks)

    # Error handlers

    @app.exception_handler(TaskError)
    async def task_error_handler(request: Request, exc: TaskError):
        if exc.status_code >= 500:
            logger.error(
                "Task operation failed: %s %s: %s",
                request.method, request.url.path, exc,
                exc_info=exc,
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        error = TaskValidationError(f"Invalid request body: {message}")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception: %s %s: %s",
            request.method, request.url.path, exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "error": "internal_error"},
        )

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    from ..config.settings import settings as _settings

    uvicorn.run(
        "taskboard.api.app:app",
        host=_settings.server.host,
        port=_settings.server.port,
        reload=_settings.debug,
    )

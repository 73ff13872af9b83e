"""
FastAPI application factory.

Usage:
    python -m api.app                    # Dev server on port 8000
    ACTIONS_STATIC_PATH=/data/actions.json python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

The service is a thin proxy in front of the action data: the collaborator
endpoints (/api/actions, /api/update-status) plus versioned read-only views
(/api/v1/...) that run the filter, sort, KPI and export pipeline.

Logging: one stream handler, plain text by default or newline-delimited JSON
when APP_LOG_FORMAT=json. Every request is logged with method, path, status,
duration and a short request id echoed in X-Request-ID.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from actions.loader import DataUnavailableError
from api import store as store_module
from api.routes import actions, dashboard, download
from api.store import ActionStore
from utils.config import AppConfig

_logger = logging.getLogger("climate_actions_api")


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "client_ip",
                    "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def configure_logging(log_format: str = "text", level: int = logging.INFO) -> None:
    """Install the process-wide log handler in text or JSON format."""
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.basicConfig(handlers=[handler], level=level, force=True)


def create_app(config: AppConfig | None = None,
               store: ActionStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings; read from the environment when omitted.
        store: Override the action store (useful for testing).

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or AppConfig.from_env()
    configure_logging(cfg.log_format)
    action_store = store or ActionStore.from_config(cfg)
    store_module.set_store(action_store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sources = action_store.chain.describe()
        if not sources["google_sheets"] and not sources["static_file_exists"]:
            _logger.warning(
                "no data source available: Google Sheets is not configured and "
                "%s does not exist. Run 'python build_actions_data.py' first.",
                sources["static_file"],
            )
        yield

    app = FastAPI(
        title="Climate Actions API",
        summary="Browse, filter and export city climate-action records.",
        description=(
            "## Climate Actions Dashboard API\n\n"
            "Serves the catalog of city climate actions behind the dashboard.\n\n"
            "### Filters\n"
            "Filtered endpoints accept the same parameters as the dashboard's "
            "shareable links: `city`, `category`, `sector`, `cost`, `status` "
            "(comma-separated values) and `search`.\n\n"
            "### Default order\n"
            "Ready to start, In progress, Completed, Not started, On hold; "
            "then city, then action name."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "actions", "description": "Raw and filtered action records, status updates."},
            {"name": "dashboard", "description": "KPI summary for the dashboard cards and charts."},
            {"name": "download", "description": "CSV and JSON export of filtered actions."},
            {"name": "meta", "description": "Health check."},
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging ───────────────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request and tag the response with a request id."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "client_ip": client_ip,
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f ip=%s rid=%s",
                request.method, path, response.status_code, duration_ms,
                client_ip, request_id,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(DataUnavailableError)
    async def data_unavailable_handler(request: Request, exc: DataUnavailableError):
        return JSONResponse(
            status_code=503,
            content={"error": "Data unavailable", "detail": str(exc), "status_code": 503},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Bad request", "detail": str(exc), "status_code": 400},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of a traceback."""
        _logger.exception("unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": None, "status_code": 500},
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 when at least one data source is available, 503 otherwise."""
        sources = action_store.chain.describe()
        ok = sources["google_sheets"] or sources["static_file_exists"]
        body = {
            "status": "ok" if ok else "no_data_source",
            "sources": sources,
            "cache": action_store.cache_stats(),
        }
        if not ok:
            return JSONResponse(status_code=503, content=body)
        return body

    # ── Register routers ──────────────────────────────────────────────────────

    prefix = "/api/v1"
    app.include_router(actions.router)
    app.include_router(actions.v1_router, prefix=prefix)
    app.include_router(dashboard.router, prefix=prefix)
    app.include_router(download.router, prefix=prefix)

    return app


if __name__ == "__main__":
    import uvicorn

    _cfg = AppConfig.from_env()
    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )

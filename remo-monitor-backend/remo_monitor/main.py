# remo_monitor/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from remo_monitor.database import settings
from remo_monitor.init_db import init_database
from remo_monitor.errors import ConfigError, RemoMonitorError
from remo_monitor.services.scheduler import start_scheduler, stop_scheduler

# Routers
from remo_monitor.routers import devices_router, sensors_router, health_router

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Nature Remo Monitor API",
        description="API for collecting and charting Nature Remo sensor readings",
        version="1.0.0",
    )

    # CORS per la dashboard (Next.js su :3000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    # Tutti gli errori come {"message": ...}
    @app.exception_handler(RemoMonitorError)
    async def remo_monitor_error_handler(request: Request, exc: RemoMonitorError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return JSONResponse(status_code=422, content={"message": errors})

    # Mount router
    app.include_router(health_router)     # /healthz, /api/health
    app.include_router(devices_router)    # /api/devices, /api/temperature
    app.include_router(sensors_router)    # /api/get-sensor-data, /api/save-sensor-data, ...

    # Startup: DB + scheduler (idempotenti)
    @app.on_event("startup")
    async def _startup():
        try:
            init_database()
        except ConfigError as e:
            logger.warning(f"Database not initialized: {e.message}")
        if settings.auto_ingest:
            start_scheduler()

    @app.on_event("shutdown")
    async def _shutdown():
        stop_scheduler()

    return app


app = create_app()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from docsim.api.v1 import analyze, health
from docsim.core.config import get_settings
from docsim.core.errors import BaseApplicationError
from docsim.core.logging import LogEvent, configure_logging, get_logger
from docsim.core.middleware import (
    RequestContextMiddleware,
    application_error_handler,
    unhandled_error_handler,
)

settings = get_settings()
configure_logging(level=settings.log_level, json_logs=settings.json_logs)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info(
        LogEvent.APP_STARTED,
        version=settings.version,
        api_prefix=settings.api_prefix,
        max_workers=settings.max_workers,
    )
    try:
        yield
    finally:
        logger.info(LogEvent.APP_STOPPED)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # 浏览器规范：当 allow_origins 为 "*" 时，不能允许 credentials
    origins = settings.get_cors_origins()
    allow_credentials = settings.cors_allow_credentials and origins != ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(BaseApplicationError, application_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health.router, tags=["health"])
    app.include_router(analyze.router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        """根路径"""
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "analyze": f"{settings.api_prefix}/analyze",
            },
        }

    Instrumentator().instrument(app).expose(app)
    return app


app = create_app()

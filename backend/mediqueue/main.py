"""
MediQueue - live queue and appointment viewer for the hospital front desk

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .token_store import TokenStore
from .services.api_client import QueueApiClient
from .services.registry import ViewRegistry
from .services.session_service import SessionService, SessionMonitor
from .routers import (
    patient_router,
    reception_router,
    doctor_router,
    session_router
)

settings = get_settings()
logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    store = TokenStore(settings.TOKEN_STORE_PATH)
    client = QueueApiClient(store, session_token_provider=store.get_session_token)
    session_service = SessionService(store, client)
    registry = ViewRegistry()
    client.on_unauthorized = session_service.handle_unauthorized
    session_service.on_logout = registry.unmount_all
    monitor = SessionMonitor(session_service)

    app.state.token_store = store
    app.state.api_client = client
    app.state.session_service = session_service
    app.state.registry = registry
    monitor.start()

    yield

    # Shutdown
    await monitor.stop()
    await app.state.registry.unmount_all()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"]
)


# Trace Middleware
@app.middleware("http")
async def trace_middleware(request: Request, call_next):
    logger.debug(f"INCOMING {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"OUTGOING {request.method} {request.url.path} -> {response.status_code}")
    return response


# Global error handler with CORS headers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path}: {exc}")

    response = JSONResponse(
        status_code=500,
        content={"detail": str(exc)}
    )
    # Force CORS headers
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "*"
    response.headers["Access-Control-Allow-Headers"] = "*"
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    response = JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers
    )
    # Force CORS headers
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response


# Include routers
app.include_router(patient_router)
app.include_router(reception_router)
app.include_router(doctor_router)
app.include_router(session_router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - health check."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Detailed health check."""
    registry = getattr(request.app.state, "registry", None)
    return {
        "status": "healthy",
        "backend": settings.API_BASE_URL,
        "mounted_views": len(registry) if registry is not None else 0,
        "version": settings.APP_VERSION
    }


# Entry point for running directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "mediqueue.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )

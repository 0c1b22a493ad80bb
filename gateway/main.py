from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
from typing import Optional

from backend.registry import KeyRegistry, build_registry
from gateway.config import Settings, settings as default_settings
from gateway.routes import users
from gateway.security import MISSING_FIELDS

# Configure logging
logging.basicConfig(level=default_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    owns_registry = app.state.registry is None
    if owns_registry:
        app.state.registry = build_registry(app.state.settings)
    logger.info(f"Starting key registry gateway ({app.state.registry.name} registry)...")

    yield

    # Shutdown
    logger.info("Shutting down key registry gateway...")
    if owns_registry:
        await app.state.registry.close()
        app.state.registry = None

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": MISSING_FIELDS})

def create_app(settings: Optional[Settings] = None, registry: Optional[KeyRegistry] = None) -> FastAPI:
    """Build the gateway app; pass `registry` to skip building one from settings"""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.app_name,
        description="API for managing user public keys onchain",
        version="1.0.0",
        debug=settings.debug,
        docs_url="/docs",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.registry = registry

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(users.router, tags=["Users"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        registry = app.state.registry
        return {
            "status": "healthy",
            "registry": registry.name if registry is not None else None
        }

    return app

app = create_app()

def run():
    """Console entry point: serve the gateway with uvicorn"""
    import uvicorn

    uvicorn.run(
        "gateway.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower()
    )

if __name__ == "__main__":
    run()

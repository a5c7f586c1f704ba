"""
Main FastAPI application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog_backend.config import get_settings
from catalog_backend.database import create_engine_from_settings, create_session_factory, create_tables
from catalog_backend.api import auth, users, products, news, events
from catalog_backend.services.admin_seed import ensure_admin_user
from catalog_backend.utils.logger import configure_logging

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = create_engine_from_settings(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # Create all tables
    await create_tables(engine)
    logger.info("Database tables created")

    # Seed admin role and user
    try:
        async with app.state.session_factory() as session:
            await ensure_admin_user(session, settings)
        logger.info("Admin check completed")
    except Exception as e:
        # startup continues without a seeded admin
        logger.error(f"Admin seed failed: {e}")

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Error in {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Server error"})


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/admin/usuarios", tags=["Admin Users"])
app.include_router(products.router, prefix="/api/productos", tags=["Products"])
app.include_router(products.admin_router, prefix="/api/admin/productos", tags=["Admin Products"])
app.include_router(news.router, prefix="/api/noticias", tags=["News"])
app.include_router(news.admin_router, prefix="/api/admin/noticias", tags=["Admin News"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.get("/api/health")
async def api_health_check():
    return {"status": "OK", "message": "KCCR backend running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "catalog_backend.main:app",
        host="0.0.0.0",
        port=4000,
        reload=settings.DEBUG
    )

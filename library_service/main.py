"""Main FastAPI application"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from library_service.api.v1.routers import (
    admin_router,
    auth_router,
    book_router,
    borrowing_router,
    category_router,
    user_router,
)
from library_service.core.config import logger, settings
from library_service.middleware import JWTAuthMiddleware, StructuredLoggingMiddleware
from library_service.models import close_db, init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Library Service...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Version: {settings.version}")

    try:
        await init_db()
        logger.info("✓ Database initialized")

        if settings.seed_data:
            from library_service.core.seed import seed_default_data

            await seed_default_data()
    except Exception as e:
        logger.error(f"Failed to initialize: {e}")
        raise

    yield

    logger.info("Shutting down Library Service...")
    await close_db()


app = FastAPI(
    title="Library Service",
    description="Library management API: catalog, users and borrowing requests",
    version=settings.version,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

# Middleware added last runs first: CORS, logging, then authentication
app.add_middleware(JWTAuthMiddleware)
app.add_middleware(StructuredLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "X-Page-Number", "X-Page-Size", "X-Correlation-ID"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return JSONResponse(
        content={
            "status": "healthy",
            "service": "library-service",
            "version": settings.version,
            "environment": settings.environment,
        }
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return JSONResponse(
        content={
            "service": "Library Service",
            "version": settings.version,
            "docs": "/docs" if settings.is_development else None,
        }
    )


app.include_router(auth_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(category_router, prefix="/api")
app.include_router(book_router, prefix="/api")
app.include_router(borrowing_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "library_service.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )

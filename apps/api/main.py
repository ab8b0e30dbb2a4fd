"""
Trendzo Content Analytics - FastAPI Backend
Main application entry point with health check and API routing.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from config import settings, validate_security_settings
from database import engine, Base, async_session_maker
import models  # noqa: F401
from routers import health, content_analytics
from services.pipeline import create_backend

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting Trendzo Content Analytics API...")
    validate_security_settings()
    if settings.AUTO_CREATE_DB_SCHEMA and settings.ANALYTICS_BACKEND == "sql":
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            print("🗄️ Database schema verified.")
        except Exception as e:
            print(f"⚠️ Database bootstrap skipped: {e}")
    if settings.ANALYTICS_BACKEND != "sql":
        app.state.analytics_backend = create_backend(settings.ANALYTICS_BACKEND, async_session_maker)
        print(f"🧪 Analytics backend: {settings.ANALYTICS_BACKEND}")
    yield
    # Shutdown
    await engine.dispose()
    print("👋 Shutting down API...")


app = FastAPI(
    title="Trendzo Content Analytics API",
    description="Score newsletter template performance and compare expert vs automated content",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(content_analytics.router, prefix="/analytics", tags=["Content Analytics"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Trendzo Content Analytics API",
        "version": "0.1.0",
        "status": "running"
    }

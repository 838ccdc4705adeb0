"""
ThingStruct Backend - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import database
from .services.persistence import load_store, save_store
from .services.store import InMemoryStore
from .services.stream import StreamManager
from .services.workspace import init_workspace, get_workspace
from .routes import (
    templates_router,
    states_router,
    stream_router,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting ThingStruct Backend...")

    await database.connect()

    store = InMemoryStore()
    if database.is_connected():
        logger.info("✓ Database connected successfully")
        await load_store(store)
    elif settings.require_database:
        raise RuntimeError(f"Could not connect to MongoDB at {settings.mongo_url}")
    else:
        logger.warning("⚠ Database connection failed - running in degraded mode")
        logger.warning("Data will not survive a restart")

    ws = init_workspace(store, StreamManager(window_hours=settings.stream_window_hours))
    if ws.initialize():
        await ws.persist()

    logger.info(f"Stream window: {settings.stream_window_hours}h starting {ws.stream.stream_start_time:%Y-%m-%d}")

    yield

    # Shutdown
    logger.info("Shutting down ThingStruct Backend...")
    if database.is_connected():
        await save_store(get_workspace().store)
    await database.disconnect()


# Create FastAPI app
app = FastAPI(
    title="ThingStruct API",
    description="Daily states, templates and the routine stream",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.allowed_origins.split(",") if settings.allowed_origins != "*" else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(templates_router, prefix="/api")
app.include_router(states_router, prefix="/api")
app.include_router(stream_router, prefix="/api")


# Health check endpoints
@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "ThingStruct API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Health check endpoint with database status"""
    db_connected = await database.check_connection()

    return {
        "status": "healthy" if db_connected else "degraded",
        "database": "connected" if db_connected else "disconnected",
        "version": "1.0.0"
    }


def run():
    """Console entry point"""
    import uvicorn

    uvicorn.run("thingstruct.main:app", host=settings.host, port=settings.port, reload=settings.debug)

"""FastAPI application setup."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.api.routers import records
from src.api.schemas import HealthResponse
from src.config.settings import get_settings
from src.records import create_records_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the records store before serving and stop it on shutdown."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    records_store = create_records_store(settings)
    # Raises StartupError when there is nothing to serve, which aborts startup
    records_store.start()
    app.state.records_store = records_store
    try:
        yield
    finally:
        records_store.stop()


# Create FastAPI app
app = FastAPI(
    title="WCA Records Cache",
    description="Cached WCA world, continental and national records",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS from CORS_ALLOW_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(records.router, prefix="/api")


@app.get("/health", response_model=HealthResponse)
def health_check(request: Request):
    """Health check endpoint with records cache freshness."""
    records_store = getattr(request.app.state, "records_store", None)
    if records_store is None or not records_store.is_ready:
        return HealthResponse(status="starting")

    snapshot = records_store.snapshot()
    return HealthResponse(
        status="healthy",
        records_updated_at=snapshot.updated_at,
        records_count=snapshot.record_count,
        next_refresh_in_seconds=records_store.next_refresh_in(),
    )


@app.get("/")
def root():
    """Root endpoint with API info."""
    return {
        "name": "WCA Records Cache API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }

"""Main FastAPI application"""
from fastapi import FastAPI
from chatwidget.middleware.cors import setup_cors
from chatwidget.middleware.error_handler import ErrorHandlerMiddleware
from chatwidget.config import get_settings
from contextlib import asynccontextmanager
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# APScheduler setup
scheduler = None


def setup_scheduler():
    """Initialize the scheduler running widget timers (auto-open, pre-chat delay)"""
    global scheduler
    from apscheduler.schedulers.asyncio import AsyncIOScheduler

    scheduler = AsyncIOScheduler()
    scheduler.start()
    logger.info("Widget timer scheduler started")
    return scheduler


def shutdown_scheduler():
    """Shutdown the scheduler gracefully"""
    global scheduler
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Widget timer scheduler stopped")


def build_registry(scheduler):
    """Wire the widget session registry from settings"""
    from chatwidget.services.message_client import WidgetApiClient
    from chatwidget.services.timers import TimerService
    from chatwidget.services.widget_sessions import (
        WidgetSessionRegistry,
        MemoryStorageFactory,
        supabase_storage_factory,
    )

    settings = get_settings()
    if settings.storage_backend == "supabase":
        from chatwidget.database import get_supabase_admin
        storage_factory = supabase_storage_factory(get_supabase_admin())
    else:
        storage_factory = MemoryStorageFactory()

    return WidgetSessionRegistry(
        api=WidgetApiClient(settings.api_base_url),
        timers=TimerService(scheduler),
        storage_factory=storage_factory,
        prechat_delay=settings.prechat_submit_delay,
        idle_timeout=settings.session_idle_timeout
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    registry = build_registry(setup_scheduler())
    app.state.widget_registry = registry

    # Sweep sessions whose page went away without a DELETE
    scheduler.add_job(
        registry.evict_idle,
        "interval",
        seconds=get_settings().session_sweep_interval,
        id="evict_idle_widget_sessions",
        name="Unmount idle widget sessions",
        replace_existing=True
    )
    logger.info(f"Widget host using {get_settings().storage_backend} session storage")
    yield
    # Shutdown
    await app.state.widget_registry.close_all()
    shutdown_scheduler()


# Create FastAPI app with lifespan
app = FastAPI(
    title="Chat Widget Host",
    description="Embeddable conversational widget engine",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Setup CORS
setup_cors(app)

# Add error handling middleware
app.add_middleware(ErrorHandlerMiddleware)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "chatwidget", "scheduler": "running" if scheduler and scheduler.running else "stopped"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Chat Widget Host",
        "version": "1.0.0",
        "docs": "/docs"
    }

# Import and include routers
from chatwidget.routers import widget

app.include_router(widget.router, prefix="/api/widget-host", tags=["Widget"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

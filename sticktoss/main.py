from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sticktoss.api.routes import router as api_router
from sticktoss.config.settings import get_settings
from sticktoss.storage.cache import GameCache, get_cache
from sticktoss.storage.database import engine, init_db
from sticktoss.utils.logging_config import setup_logging


# Setup logging
logger = setup_logging()
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    description="Balanced team generator with lock and separation constraints",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.app_name}...")
    init_db()
    logger.info(f"Database initialized ({engine.dialect.name})")
    if not get_cache().health_check():
        logger.warning("Redis unreachable, shared games will be served from the database only")
    if settings.random_seed is not None:
        logger.info(f"Team generator seeded with {settings.random_seed}, line-ups are reproducible")
    else:
        logger.info("Team generator seeded from OS entropy")
    logger.info(f"Share links use {settings.share_id_length}-character ids")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.app_name}...")

app.include_router(api_router, prefix="/api/v1", tags=["teams"])


@app.get("/health", tags=["health"])
def health_check(cache: GameCache = Depends(get_cache)):
    """Health check endpoint for monitoring and load balancers. A down cache only degrades game reads."""
    return {
        "status": "ok",
        "app": settings.app_name,
        "version": "1.0.0",
        "cache": "ok" if cache.health_check() else "unavailable",
    }

"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from autoshorts.config import settings
from autoshorts.api.routes import router

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting AutoShorts...")
    logger.info(f"Serving clips from {settings.clips_dir.resolve()}")
    if not settings.youtube_api_key:
        logger.warning("YOUTUBE_API_KEY is not set; video lookups will fail")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; transcripts will use automatic captions")

    yield

    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Highlight detection and vertical short clip generation",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api")

# Generated clips are served by filename
app.mount("/clips", StaticFiles(directory=str(settings.clips_dir)), name="clips")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "version": "1.0.0",
        "api": "/api",
        "clips": "/clips",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "autoshorts.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

"""FastAPI application for the Influencer Trust service."""

import contextlib
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from ..infrastructure.dependencies import get_service_container
from .endpoints import analysis, health, influencers, leaderboard

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the service container on startup and release it on shutdown."""
    container = get_service_container()
    try:
        await container.initialize()
    except Exception as e:
        # Services are retried lazily on the first request
        logger.warning(f"⚠️ Failed to initialize services at startup: {e}")

    yield  # Application runs here

    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Influencer Trust API",
    description="Verifies health influencers, classifies their claims and tracks trust scores",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(influencers.router)
app.include_router(analysis.router)
app.include_router(leaderboard.router)

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from numberquest.config import get_settings
from numberquest.problems.difficulty import DifficultyLevel
from numberquest.websocket.handler import router as websocket_router

# Configure logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    logger.info("Starting NumberQuest backend...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Difficulty authority: {settings.difficulty_authority}")

    yield

    logger.info("Shutting down NumberQuest backend...")


app = FastAPI(
    title="NumberQuest API",
    description="Adaptive math practice backend for NumberQuest",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(websocket_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint for health check."""
    return {"status": "ok", "service": "numberquest-backend"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "0.1.0",
    }


@app.get("/difficulty/{level}")
async def difficulty_table(level: int) -> dict[str, Any]:
    """Gameplay parameters for a difficulty level (clamped to 1-10)."""
    return DifficultyLevel(level).to_dict()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "numberquest.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers,
    )

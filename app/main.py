import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from app.config.settings import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler: report which upstreams are configured."""
    if settings.ai_enabled:
        logger.info("OpenAI key configured; AI endpoints use model %s", settings.OPENAI_MODEL)
    else:
        logger.info("OPENAI_API_KEY not set; AI endpoints will serve deterministic fallbacks")
    if not settings.TMDB_API_KEY:
        logger.warning("TMDB_API_KEY not set; catalog endpoints will return 503")
    yield


app = FastAPI(title="Reelmate", lifespan=lifespan)

# wildcard origins cannot be combined with credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )

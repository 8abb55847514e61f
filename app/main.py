import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import config
from app.api.routes import router
from app.middleware.rate_limit import RateLimitMiddleware

logger = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("QueShield API server starting on port %d", config.PORT)
    logger.info("Health check: http://localhost:%d/health", config.PORT)
    if config.RATE_LIMIT_ENABLED:
        logger.info(
            "Rate limit: %d requests per %d seconds",
            config.RATE_LIMIT_MAX_REQUESTS, config.RATE_LIMIT_WINDOW_SECONDS
        )
    yield
    logger.info("QueShield API server stopped")


configure_logging()

app = FastAPI(title="QueShield API", lifespan=lifespan)

if config.RATE_LIMIT_ENABLED:
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=config.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
        exempt_paths=("/health", f"{config.API_PREFIX}/health"),
        trust_proxy_headers=config.TRUST_PROXY_HEADERS,
    )

# Outermost, so 429 responses still carry CORS headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)

# The dashboard calls the API under a prefix (e.g. /api/threats)
if config.API_PREFIX:
    app.include_router(router, prefix=config.API_PREFIX, include_in_schema=False)


def run():
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()

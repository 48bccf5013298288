import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from unified_orders.config import settings
from unified_orders.database import get_engine
from unified_orders.infrastructure.db_schema import metadata
from unified_orders.presentation.api import router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    if settings.CREATE_TABLES:
        async with get_engine().begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Tables created")

    yield

    await get_engine().dispose()
    logger.info("Application shutting down...")


app = FastAPI(
    title="Unified Order Service",
    description="Cross-domain orders for hotel, shopping, travel, food and bill payments",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Unified Order Service is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}

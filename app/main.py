import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.core.config import settings
from app.api.router import api_router

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Bridging to {settings.BRIDGE_URL} "
        f"(executor: {settings.EXECUTOR_FUNCTION_NAME}, "
        f"orchestrator: {settings.ORCHESTRATOR_FUNCTION_NAME})"
    )
    yield


app = FastAPI(title="MAAT Query Bridge API", lifespan=lifespan)

# Include the master router containing all our endpoints
app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Welcome to the MAAT Query Bridge API"}


@app.get("/health")
async def health():
    return {"status": "ok"}

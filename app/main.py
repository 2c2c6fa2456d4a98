import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.seed import seed_demo_data
from app.db.session import init_ledger_service, shutdown_ledger_service
from app.api.v1.api import api_router

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    ledger = await init_ledger_service()
    if settings.SEED_DEMO_DATA:
        await seed_demo_data(ledger, settings.DEMO_OWNER_ID)
    yield
    await shutdown_ledger_service()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    return {"message": "Welcome to Quiniela Ledger API"}

@app.get("/health")
async def health():
    return {"status": "ok", "backend": settings.LEDGER_BACKEND}

app.include_router(api_router, prefix=settings.API_V1_STR)

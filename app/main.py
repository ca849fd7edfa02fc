import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.db.base import Base, import_models
from app.db.session import engine

from app.api.auth import router as auth_router
from app.api.claims import router as claims_router
from app.api.line_items import router as line_items_router
from app.api.documents import router as documents_router
from app.api.hr import router as hr_router
from app.api.reference_data import router as reference_data_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

import_models()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # DEV ONLY: production schemas are managed outside the API
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    logger.info("Starting %s (%s)", settings.APP_NAME, settings.ENV)
    yield
    logger.info("Shutting down %s", settings.APP_NAME)


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ROUTERS
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(claims_router, prefix="/api/claims", tags=["claims"])
app.include_router(line_items_router, prefix="/api", tags=["claim-line-items"])
app.include_router(documents_router, prefix="/api/documents", tags=["documents"])
app.include_router(hr_router, prefix="/api/hr", tags=["hr"])
app.include_router(reference_data_router, prefix="/api", tags=["reference-data"])


@app.get("/api/health")
def health():
    return {"status": "ok"}

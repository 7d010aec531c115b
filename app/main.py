import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import create_tables, async_session
from app.seed import seed_data
from app.routers.users import router as users_router
from app.routers.projects import router as projects_router
from app.routers.sessions import router as sessions_router
from app.routers.items import router as items_router
from app.routers.builder import router as builder_router
from app.utils.exceptions import register_exception_handlers

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.database_url.startswith("sqlite"):
        os.makedirs(settings.data_dir, exist_ok=True)
    await create_tables()
    if settings.seed_demo_data:
        async with async_session() as session:
            await seed_data(session)
        logger.info("Demo data ready")
    yield


app = FastAPI(
    title="SiteAudit API",
    description="Construction quality-audit tracker: structure, checklists, audit sessions and defects",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(users_router, prefix="/api/v1")
app.include_router(projects_router, prefix="/api/v1")
app.include_router(sessions_router, prefix="/api/v1")
app.include_router(items_router, prefix="/api/v1")
app.include_router(builder_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "success", "data": {"service": "site-audit-api", "version": "0.1.0"}, "message": None}

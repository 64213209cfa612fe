import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from trendhaven.core.cache import close_redis
from trendhaven.core.config import settings
from trendhaven.core.db import create_all, dispose_engine
from trendhaven.core.errors import register_error_handlers
from trendhaven.llm import register_default_providers
from trendhaven.routers import auth as auth_router
from trendhaven.routers import health, outfits

logger = logging.getLogger("app.requests")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.identity_configured:
        logging.getLogger("uvicorn.error").warning("identity provider not configured: set JWT_SECRET")
    if settings.DB_CREATE_ALL:
        await create_all()
    yield
    await close_redis()
    await dispose_engine()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS
origins = settings.cors_origin_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

prefix = settings.API_PREFIX
app.include_router(health.router, prefix=prefix)
app.include_router(auth_router.router, prefix=prefix)
app.include_router(outfits.router, prefix=prefix)

register_default_providers()

if (settings.STORAGE_BACKEND or "local").lower() == "local":
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.get("/")
async def root():
    return {"name": settings.APP_NAME, "env": settings.APP_ENV}

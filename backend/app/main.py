"""
FastAPI application.

Routers are mounted at the root (`/auth`, `/jobs`, `/applications`, `/health`), not
under an `/api` prefix; a frontend written against `/api/...` needs a proxy rewrite.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import application as application_api
from .api import auth as auth_api
from .api import job as job_api
from .config import FRONTEND_ORIGINS
from .database import init_db
from .logging_config import configure_logging
from .utils.error_handlers import register_exception_handlers

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Job Board API")

app.include_router(auth_api.router)
app.include_router(job_api.router)
app.include_router(application_api.router)

register_exception_handlers(app)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Job Board API"
    }


_default_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=[*_default_origins, *FRONTEND_ORIGINS],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
logger.info("CORS allowlist: %s", [*_default_origins, *FRONTEND_ORIGINS])


@app.on_event("startup")
def on_startup() -> None:
    init_db()
    logger.info("Database tables ready")

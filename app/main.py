from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.logging import configure_logging
from app.models import activity_log, employee, job_card, mini_job_card, overtime_ledger  # noqa: F401
from app.routers.auth import router as auth_router
from app.routers.employees import router as employees_router
from app.routers.job_cards import router as job_cards_router
from app.routers.logs import router as logs_router
from app.routers.mini_job_cards import router as mini_job_cards_router
from app.routers.reports import router as reports_router
from app.routers.sessions import router as sessions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(
    title="Field Service Time Accounting",
    lifespan=lifespan,
)


@app.middleware("http")
async def catch_unhandled_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled exception")
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


app.include_router(auth_router)
app.include_router(employees_router)
app.include_router(job_cards_router)
app.include_router(mini_job_cards_router)
app.include_router(sessions_router)
app.include_router(reports_router)
app.include_router(logs_router)


@app.get("/")
def root():
    return {"status": "Field Service Time Accounting running"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": "1.0.0",
    }

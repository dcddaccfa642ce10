import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tripmates.api import invitations, trip_items, trips, users
from tripmates.core.config import get_settings
from tripmates.core.database import create_schema, ping_database
from tripmates.core.errors import USER_MESSAGES, ErrorCode, TripmatesError

root = logging.getLogger()
if not root.handlers:  # don't double-add in reloads
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(h)

root.setLevel(logging.INFO)

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_schema()
    logger.info("Tripmates API started (env=%s)", settings.app_env)
    yield


app = FastAPI(title="Tripmates API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TripmatesError)
async def tripmates_error_handler(request: Request, exc: TripmatesError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "detail": USER_MESSAGES[ErrorCode.operation_failed],
            "code": ErrorCode.operation_failed,
        },
    )


app.include_router(users.router)
app.include_router(trips.router)
app.include_router(invitations.router)
for router in trip_items.routers:
    app.include_router(router)


@app.get("/health", tags=["health"])
def health_check():
    """Report service status and confirm database connectivity."""
    database_status = "ok" if ping_database() else "error"
    return {
        "status": "ok",
        "database": database_status,
    }

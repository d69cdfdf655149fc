# tasker/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# 루트 .env 로딩 (settings보다 먼저)
load_dotenv()

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402
from sqlmodel import text  # noqa: E402
from starlette.exceptions import HTTPException as StarletteHTTPException  # noqa: E402

from tasker.core.config import get_settings  # noqa: E402
from tasker.core.errors import AppError, InternalError  # noqa: E402
from tasker.core.logging_config import setup_logging  # noqa: E402
from tasker.db.session import create_all_tables, engine  # noqa: E402

# 모델 모듈 임포트(테이블 등록 보장용)
from tasker.models import task as _m_task  # noqa: F401,E402
from tasker.models import task_history as _m_history  # noqa: F401,E402
from tasker.models import user as _m_user  # noqa: F401,E402

# 라우터
from tasker.routers import auth, task, user  # noqa: E402

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

if settings.uses_insecure_secret:
    logger.warning("JWT_SECRET_KEY is the insecure default; set it before deploying")


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.db_auto_create:
        # Normally a migration concern (alembic); handy for local sqlite runs.
        create_all_tables()
    yield


app = FastAPI(
    title="Tasker Backend",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url=None if settings.app_env == "prod" else "/docs",
    redoc_url=None if settings.app_env == "prod" else "/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Origin", "Content-Type", "Authorization"],
)


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _error(exc.status_code, exc.message, exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return _error(400, "invalid request")
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "invalid value")
    return _error(400, f"{loc}: {msg}" if loc else msg)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("store failure on %s %s", request.method, request.url.path)
    return _error(500, "internal server error")


# 라우터 등록
app.include_router(auth.auth_router)
app.include_router(user.user_router)
app.include_router(task.router)


@app.get("/health")
def health_app():
    return {"ok": True}


@app.get("/health/db")
def health_db():
    # Migration is a deployment concern. Runtime only verifies DB connectivity.
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"ok": True}
    except SQLAlchemyError:
        logger.exception("database health check failed")
        raise InternalError("database connection failed")

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from .config import settings
from .core.errors import ExpenseError, NotFoundError, ValidationError
from .database import init_db
from .logging_config import configure_logging
from .routers import expenses as expenses_router
from .routers import stats as stats_router


logger = logging.getLogger(__name__)


def _error_body(error: str, details=None) -> dict:
    return {"error": error, "details": list(details or [])}


def _describe(error: dict) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts on locations
    loc = [str(part) for part in error.get("loc", ())[1:]]
    field = ".".join(loc) or "request"
    return f"{field}: {error.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Validation failed", [_describe(e) for e in exc.errors()]),
        )

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(exc.message, exc.details),
        )

    @app.exception_handler(ExpenseError)
    async def expense_error(request: Request, exc: ExpenseError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(exc.message, exc.details),
        )

    @app.exception_handler(OperationalError)
    async def storage_unavailable(request: Request, exc: OperationalError):
        logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=_error_body("Database unavailable, please retry"),
        )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Expense Tracker – Backend", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.on_event("startup")
    def on_startup():
        init_db()
        logger.info("Expense tracker started (environment=%s)", settings.environment)

    @app.get("/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(expenses_router.router)
    app.include_router(stats_router.router)

    return app


app = create_app()

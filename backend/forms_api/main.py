import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from forms_api.api.router import api_router
from forms_api.core.config import Settings, get_settings
from forms_api.core.database import create_db_engine, create_session_factory
from forms_api.core.logging import configure_logging
from forms_api.services.audit import AuditPublisher, build_audit_publisher
from forms_api.services.entitlements import EntitlementClient
from forms_api.services.exceptions import FormsError, StructuralInvalidError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        "Starting %s (environment=%s, entitlements=%s, audit=%s)",
        settings.PROJECT_NAME,
        settings.ENVIRONMENT,
        settings.USE_ENTITLEMENT_API,
        settings.PUBLISH_AUDIT_EVENTS,
    )

    yield

    logger.info("Shutting down, disposing database engine")
    app.state.engine.dispose()


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FormsError)
    async def handle_forms_error(request: Request, exc: FormsError):
        content = {"error": exc.error, "message": str(exc)}
        if isinstance(exc, StructuralInvalidError) and exc.errors:
            content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=HTTPStatus.BAD_REQUEST,
            content={"error": "Bad Request", "message": _format_validation_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": HTTPStatus(exc.status_code).phrase, "message": str(exc.detail)},
            headers=exc.headers,
        )


def create_app(
    settings: Settings | None = None,
    *,
    audit_publisher: AuditPublisher | None = None,
    entitlement_client: EntitlementClient | None = None,
) -> FastAPI:
    """Build the application.

    Collaborators default to what ``settings`` describes; tests pass their
    own doubles instead.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    engine = create_db_engine(settings.DATABASE_URL)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.audit_publisher = audit_publisher or build_audit_publisher(settings)
    app.state.entitlement_client = entitlement_client or EntitlementClient(
        settings.ENTITLEMENT_URL, timeout=settings.ENTITLEMENT_TIMEOUT_SECONDS
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    def health_check():
        return {"message": "success"}

    return app

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backoffice.container import build_container
from backoffice.domain.errors import AppError, RateLimitExceeded
from .error import ClientError, ServerError
from .middleware import RequestIdMiddleware, RequestLoggingMiddleware
from .utils.response import error_content

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"

HTTP_ERROR_CODES = {
    400: "VALIDATION_ERROR",
    401: "AUTHENTICATION_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMIT_EXCEEDED",
}


def _details(request: Request, details):
    """Error details are only exposed in development."""
    if request.app.state.config.is_development():
        return details
    return None


async def handle_client_error(request: Request, exc: ClientError):
    error = exc.base_error
    logger.warning(f"Client error: {error.code} {error.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(error.code, error.message, _details(request, error.details)),
    )


async def handle_server_error(request: Request, exc: ServerError):
    error = exc.base_error
    logger.error(f"Server error: {error.code} {error.message}")
    details = {"code": error.code, "message": error.message}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_content(
            "INTERNAL_SERVER_ERROR", "Internal server error", _details(request, details)
        ),
    )


async def handle_app_error(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    else:
        logger.warning(f"{exc.code}: {exc.message}")

    headers = exc.headers if isinstance(exc, RateLimitExceeded) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(exc.code, exc.message, _details(request, exc.details)),
        headers=headers,
    )


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "INTERNAL_SERVER_ERROR")
    message = exc.detail if isinstance(exc.detail, str) else code.replace("_", " ").capitalize()
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(code, message),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_content("VALIDATION_ERROR", "Invalid request data", {"errors": errors}),
    )


async def handle_integrity_error(request: Request, exc: IntegrityError):
    orig = exc.orig
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    text = str(orig).lower()
    logger.warning(f"Integrity error: {text}")

    if sqlstate == UNIQUE_VIOLATION or "unique" in text or "duplicate" in text:
        status_code, code, message = 409, "ALREADY_EXISTS", "Resource already exists"
    elif sqlstate == FOREIGN_KEY_VIOLATION or "foreign key" in text:
        status_code, code, message = 400, "VALIDATION_ERROR", "Referenced resource does not exist"
    elif sqlstate == NOT_NULL_VIOLATION or "not null" in text:
        status_code, code, message = 400, "VALIDATION_ERROR", "Required field is missing"
    else:
        status_code, code, message = 500, "INTERNAL_SERVER_ERROR", "Internal server error"

    return JSONResponse(
        status_code=status_code,
        content=error_content(code, message, _details(request, {"database": str(orig)})),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_content(
            "INTERNAL_SERVER_ERROR",
            "Internal server error",
            _details(request, {"exception": repr(exc)}),
        ),
    )


def create_app(
    ApplicationConfig,
    redis_client=None,
    uow_factory=None,
    oauth_provider=None,
) -> FastAPI:
    container = build_container(
        ApplicationConfig,
        redis_client=redis_client,
        uow_factory=uow_factory,
        oauth_provider=oauth_provider,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.SESSION_CLEANUP_INTERVAL > 0:
            await container.session_cleanup.start()
        yield
        await container.close()

    app = FastAPI(title=ApplicationConfig.APP_NAME, version="0.1.0", lifespan=lifespan)
    app.state.config = ApplicationConfig
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
            "Retry-After",
        ],
    )
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    from backoffice.api.routes import activity, auth, health_check, stores, users

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(stores.router, prefix=prefix, tags=["Stores"])
    app.include_router(users.router, prefix=prefix, tags=["Users"])
    app.include_router(activity.router, prefix=prefix, tags=["Activity"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app

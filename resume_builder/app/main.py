import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from resume_builder.app.api.routes.auth import router as auth_router
from resume_builder.app.api.routes.resume import router as resume_router
from resume_builder.app.core.config import get_settings
from resume_builder.app.core.exceptions import ResumeValidationError
from resume_builder.app.middleware import refresh_session_middleware

log = logging.getLogger(__name__)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render HTTP errors as `{"message": detail}`."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed requests as 400 with the first offending field."""
    errors = exc.errors()
    body: dict[str, str] = {"message": "Invalid request"}
    if errors:
        first = errors[0]
        body["message"] = first.get("msg", body["message"])
        # Drop the "body" / "path" / "query" prefix from the location
        loc = list(first.get("loc", ())[1:])
        # A bare position (e.g. a JSON decode offset) does not name a field
        if loc and isinstance(loc[0], str):
            body["field"] = ".".join(str(part) for part in loc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def resume_validation_exception_handler(
    request: Request, exc: ResumeValidationError
) -> JSONResponse:
    """Render resume payload validation failures as 400 `{message, field}`."""
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and answer 500 without leaking details."""
    _msg = f"Unhandled error on {request.method} {request.url.path}"
    log.exception(_msg, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        None

    Returns:
        FastAPI: The configured FastAPI application instance.

    Notes:
        1. Initialize the FastAPI application with the title "Resume Builder API".
        2. Register exception handlers so every error body is `{"message", "field"?}`.
        3. Add CORS middleware for the configured origins, with credentials allowed.
        4. Add the sliding-session refresh middleware.
        5. Include the auth and resume routers.
        6. Define a health check endpoint at "/health".

    """
    _msg = "Creating FastAPI application"
    log.debug(_msg)

    settings = get_settings()
    app = FastAPI(title="Resume Builder API")

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ResumeValidationError, resume_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BaseHTTPMiddleware, dispatch=refresh_session_middleware)

    app.include_router(auth_router)
    app.include_router(resume_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    _msg = "FastAPI application created successfully"
    log.debug(_msg)
    return app


app = create_app()

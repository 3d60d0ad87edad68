"""
SchoolCounsel FastAPI Application

Multi-tenant school counselling records: student profiles, counselor
assessments and appointments.
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from schoolcounsel import __version__
from schoolcounsel.config import settings
from schoolcounsel.core.database import close_db, engine
from schoolcounsel.core.errors import (
    Internal,
    RateLimited,
    ServiceError,
    ValidationError,
    Violation,
)
from schoolcounsel.core.rate_limit import RateLimiter, SlidingWindowRateLimiter
from schoolcounsel.core.schemas.common import error_body

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    429: "rate_limited",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Startup:
    - Configure logging
    - Verify database connection

    Shutdown:
    - Close database connections
    """
    # Startup
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("🚀 SchoolCounsel API starting...")

    # Verify database connection
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        print("✅ Database connection verified")
    except Exception as e:
        print(f"❌ Database connection failed: {e}")
        raise

    print("✅ SchoolCounsel API ready!")

    yield

    # Shutdown
    print("🛑 SchoolCounsel API shutting down...")
    await close_db()
    print("✅ Shutdown complete")


# ============================================================================
# Error envelopes
# ============================================================================


def error_response(exc: ServiceError) -> JSONResponse:
    headers = None
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.to_error()),
        headers=headers,
    )


def violations_from_request(exc: RequestValidationError) -> list[Violation]:
    """Flatten FastAPI request errors, dropping the leading ``body``/``query`` part."""
    violations = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        field = ".".join(loc) or "body"
        message = f"{field} is required" if error.get("type") == "missing" else error["msg"]
        violations.append(Violation(field=field, message=message))
    return violations


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(ValidationError(violations=violations_from_request(exc)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(
            str(exc.detail), {"code": HTTP_ERROR_CODES.get(exc.status_code, "http_error")}
        ),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(Internal())


# ============================================================================
# Rate limiting
# ============================================================================


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def rate_limit_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Reject API calls over the per-client budget with 429."""
    limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None or not request.url.path.startswith(API_PREFIX):
        return await call_next(request)

    decision = limiter.hit(client_key(request))
    if not decision.allowed:
        return error_response(RateLimited(retry_after=decision.retry_after))

    response = await call_next(request)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    return response


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="SchoolCounsel API",
        description="School counselling records: profiles, assessments and appointments",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # Error envelopes
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Rate limiting (in-process; replace app.state.rate_limiter for shared storage)
    app.state.rate_limiter = (
        SlidingWindowRateLimiter(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
        if settings.RATE_LIMIT_ENABLED
        else None
    )
    app.middleware("http")(rate_limit_middleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not settings.is_local,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoints
    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "SchoolCounsel API",
            "status": "operational",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health", tags=["Health"], response_model=None)
    async def health_check() -> JSONResponse:
        """Health check endpoint for load balancers.

        Returns:
            - status: healthy/unhealthy
            - checks: Individual health checks
        """
        checks: dict[str, dict[str, Any]] = {}

        # Database health
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            checks["database"] = {"status": "healthy"}
        except Exception as e:
            checks["database"] = {"status": "unhealthy", "error": str(e)}

        all_healthy = all(check["status"] == "healthy" for check in checks.values())
        status_code = 200 if all_healthy else 503

        return JSONResponse(
            status_code=status_code,
            content={
                "status": "healthy" if all_healthy else "unhealthy",
                "environment": settings.ENVIRONMENT,
                "checks": checks,
            },
        )

    @app.get("/health/ready", tags=["Health"], response_model=None)
    async def readiness_check() -> dict[str, str] | JSONResponse:
        """Readiness check for Kubernetes.

        Returns 200 when app is ready to serve traffic.
        """
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ready"}
        except Exception:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready"},
            )

    @app.get("/health/live", tags=["Health"])
    async def liveness_check() -> dict[str, str]:
        """Liveness check for Kubernetes.

        Returns 200 if app is alive (even if not fully functional).
        """
        return {"status": "alive"}

    # Register API routers
    from schoolcounsel.api.v1 import appointments, assessments, auth, student_profile, users

    app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
    app.include_router(
        assessments.router, prefix=f"{API_PREFIX}/assessments", tags=["Assessments"]
    )
    app.include_router(
        student_profile.router, prefix=f"{API_PREFIX}/student-profile", tags=["Student Profile"]
    )
    app.include_router(
        appointments.router, prefix=f"{API_PREFIX}/appointments", tags=["Appointments"]
    )
    app.include_router(users.router, prefix=f"{API_PREFIX}/users", tags=["Directory"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "schoolcounsel.main:app",
        host="0.0.0.0",  # nosec B104 - Intentional for containerized deployment
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )

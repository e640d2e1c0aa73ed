import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from journal_reflect import __version__
from journal_reflect.api.dependencies import HandlerDep, build_lifespan
from journal_reflect.config import Settings, configure_logging, settings
from journal_reflect.dto import ErrorResponse, HealthCheckResponse, ReflectionResponse
from journal_reflect.entities import ErrorKind, ReflectionError
from journal_reflect.protocols import Clock, ModelCaller
from journal_reflect.services import client_id_from_headers

logger = logging.getLogger(__name__)

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse}
    for code in (400, 405, 429, 500, 503, 504)
}


def error_response(error: ReflectionError) -> JSONResponse:
    """Render a ReflectionError as the JSON error contract."""
    body = ErrorResponse(
        error=error.kind.value,
        message=error.message,
        retry_after=error.retry_after,
        details=error.details,
    )
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def create_app(
    app_settings: Settings | None = None,
    model_caller: ModelCaller | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        app_settings: Settings override. Defaults to the global settings.
        model_caller: Model backend override (tests inject stubs here).
        clock: Time source override for rate limiting and caching.

    Returns:
        The configured FastAPI app
    """
    cfg = app_settings or settings

    app = FastAPI(
        title="Journal Reflect API",
        description="AI reflections on journal entries with rate limiting, caching and model fallback",
        version=__version__,
        lifespan=build_lifespan(cfg, model_caller=model_caller, clock=clock),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Journal Reflect API",
            "version": __version__,
            "description": "AI reflections on journal entries",
            "endpoints": {
                "reflect": "/api/reflect",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint with cache and rate limiter stats."""
        return await handler.health_check()

    @app.post(
        "/api/reflect",
        response_model=ReflectionResponse,
        responses=ERROR_RESPONSES,
    )
    async def reflect(request: Request, handler: HandlerDep) -> Any:
        """Process a journal entry into a summary, pattern and suggestion.

        The body is decoded by hand so malformed JSON and missing fields get
        the service's own validation messages rather than FastAPI's 422.
        """
        try:
            body = await request.json()
        except ValueError as e:
            return error_response(
                ReflectionError(
                    ErrorKind.VALIDATION,
                    "Invalid JSON in request body",
                    details=str(e),
                )
            )

        try:
            return await handler.reflect(body, client_id_from_headers(request.headers))
        except ReflectionError as e:
            return error_response(e)
        except Exception as e:
            logger.exception("Unhandled error while processing reflection")
            return error_response(
                ReflectionError(
                    ErrorKind.INTERNAL_ERROR,
                    "Internal server error",
                    details=repr(e) if cfg.is_development else None,
                )
            )

    @app.get("/api/reflect", responses={405: {"model": ErrorResponse}})
    async def reflect_method_not_allowed() -> JSONResponse:
        """Reject GET with the error contract instead of a bare 405."""
        return error_response(
            ReflectionError(
                ErrorKind.VALIDATION,
                "Method not allowed. Use POST to process journal entries.",
                status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            )
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(
        "journal_reflect.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )

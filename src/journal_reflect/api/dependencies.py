"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services created once in the lifespan and stored in app.state
    - Dependency functions retrieve from request.app.state
    - The janitor starts with the app and is cancelled on shutdown
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from journal_reflect.config import Settings, configure_logging, settings
from journal_reflect.handlers import ReflectHandler
from journal_reflect.protocols import Clock, ModelCaller
from journal_reflect.repositories import ContentCache, OpenAIModelCaller
from journal_reflect.services import ErrorClassifier, Janitor, ModelOrchestrator, RateLimiter

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> ReflectHandler:
    """Dependency injection for ReflectHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ReflectHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "reflect_handler", None)
    if handler is None:
        raise RuntimeError("ReflectHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(
    app_settings: Settings | None = None,
    model_caller: ModelCaller | None = None,
    clock: Clock | None = None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Create the lifespan context manager for the FastAPI app.

    Args:
        app_settings: Settings to build services from. Defaults to the global settings.
        model_caller: Model backend. Defaults to an OpenAIModelCaller owned by the app.
        clock: Time source for the rate limiter and cache. Defaults to the system clock.

    Returns:
        A lifespan function suitable for ``FastAPI(lifespan=...)``
    """
    cfg = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize all layers and store them in app.state.

        1. Rate limiter and content cache (in-memory state)
        2. Model caller and orchestrator
        3. Handler (request lifecycle) - stored in app.state.reflect_handler
        4. Janitor - started here, cancelled on shutdown
        """
        configure_logging(cfg.log_level)

        owned_caller = None
        caller = model_caller
        if caller is None:
            owned_caller = OpenAIModelCaller(
                api_key=cfg.openai_api_key,
                base_url=cfg.openai_base_url,
                max_tokens=cfg.openai_max_tokens,
                temperature=cfg.openai_temperature,
                timeout_ms=cfg.openai_timeout_ms,
            )
            caller = owned_caller

        rate_limiter = RateLimiter(
            limit=cfg.rate_limit_rpm,
            window_seconds=cfg.rate_limit_window_seconds,
            clock=clock,
            enabled=cfg.rate_limit_enabled,
        )
        cache = ContentCache(
            ttl=cfg.cache_ttl,
            max_entries=cfg.cache_max_entries,
            clock=clock,
        )
        orchestrator = ModelOrchestrator.create(
            model_caller=caller,
            primary_model=cfg.openai_model,
            fallback_model=cfg.openai_fallback_model,
        )
        classifier = ErrorClassifier(
            timeout_retry_after=cfg.provider_timeout_seconds,
            include_details=cfg.is_development,
        )
        handler = ReflectHandler(
            rate_limiter=rate_limiter,
            cache=cache,
            orchestrator=orchestrator,
            classifier=classifier,
        )
        janitor = Janitor(rate_limiter=rate_limiter, interval=cfg.rate_limit_window_seconds)

        app.state.settings = cfg
        app.state.rate_limiter = rate_limiter
        app.state.content_cache = cache
        app.state.reflect_handler = handler
        app.state.janitor = janitor

        janitor.start()
        logger.info(
            "Reflection service started (models: %s -> %s, %d req/min, cache ttl %ss)",
            cfg.openai_model,
            cfg.openai_fallback_model,
            cfg.rate_limit_rpm,
            cfg.cache_ttl,
        )

        try:
            yield
        finally:
            await janitor.stop()
            if owned_caller is not None:
                await owned_caller.close()

            del app.state.janitor
            del app.state.reflect_handler
            del app.state.content_cache
            del app.state.rate_limiter
            del app.state.settings
            logger.info("Reflection service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ReflectHandler, Depends(get_handler)]

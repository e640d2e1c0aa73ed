"""Request lifecycle for journal reflections.

validate -> rate limit -> cache lookup -> (miss) orchestrate -> classify
failures -> cache success.

Concurrent identical requests are not coalesced: each one that misses the
cache runs its own model call sequence.
"""

import logging
from typing import Any

from journal_reflect.dto import HealthCheckResponse, ReflectionRequest, ReflectionResponse
from journal_reflect.entities import ErrorKind, ReflectionError
from journal_reflect.repositories import ContentCache, content_hash
from journal_reflect.services import (
    ErrorClassifier,
    ModelOrchestrator,
    RateLimiter,
    validate_request,
)

logger = logging.getLogger(__name__)


class ReflectHandler:
    """Composes validation, rate limiting, caching and orchestration.

    Example:
        ```python
        handler = ReflectHandler(
            rate_limiter=RateLimiter.create(),
            cache=ContentCache.create(),
            orchestrator=ModelOrchestrator.create(model_caller=caller),
            classifier=ErrorClassifier(),
        )

        @app.post("/api/reflect")
        async def reflect(request: Request):
            body = await request.json()
            return await handler.reflect(body, client_id_from_headers(request.headers))
        ```
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        cache: ContentCache,
        orchestrator: ModelOrchestrator,
        classifier: ErrorClassifier | None = None,
    ) -> None:
        """Initialize the reflect handler.

        Args:
            rate_limiter: Per-client admission control (required).
            cache: Content-addressed reflection cache (required).
            orchestrator: Primary/fallback model orchestration (required).
            classifier: Upstream error classifier. Defaults to a settings-based one.
        """
        self._rate_limiter = rate_limiter
        self._cache = cache
        self._orchestrator = orchestrator
        self._classifier = classifier or ErrorClassifier()

    async def reflect(self, body: Any, client_id: str) -> ReflectionResponse:
        """Handle POST /api/reflect requests.

        Args:
            body: The decoded JSON request body
            client_id: Rate limit key for the caller

        Returns:
            The reflection, from cache or from the model

        Raises:
            ReflectionError: For validation, rate limit and classified provider failures
        """
        content = validate_request(body)

        decision = self._rate_limiter.admit(client_id)
        if not decision.allowed:
            raise ReflectionError(
                ErrorKind.RATE_LIMIT,
                "Too many requests. Please try again later.",
                retry_after=decision.retry_after,
            )

        key = content_hash(content)
        cached = self._cache.get(key, content=content)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        preferences = body.get("preferences")
        request = ReflectionRequest(
            content=content,
            preferences=preferences if isinstance(preferences, dict) else None,
        )

        try:
            response = await self._orchestrator.reflect(request)
        except Exception as e:
            error = self._classifier.classify(e)
            logger.error("Reflection failed (%s): %s", error.kind.value, e)
            if error is e:
                raise
            raise error from e

        self._cache.put(key, response, content=content)
        return response

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        return HealthCheckResponse(
            status="healthy",
            models={
                "primary": self._orchestrator.primary_model,
                "fallback": self._orchestrator.fallback_model,
            },
            cache=self._cache.get_stats(),
            rate_limit=self._rate_limiter.get_stats(),
        )

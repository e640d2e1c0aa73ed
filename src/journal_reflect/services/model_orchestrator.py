"""Primary/fallback model orchestration.

One call sequence per request: the primary model, then, only if it fails,
the fallback model with identical prompts. No further retries happen here;
retrying beyond the fallback hop is left to clients and operators.
"""

import logging
import time
from datetime import datetime, timezone

from journal_reflect.config import settings
from journal_reflect.dto import ReflectionMetadata, ReflectionRequest, ReflectionResponse
from journal_reflect.entities import ReflectionParts
from journal_reflect.prompts import SYSTEM_PROMPT, build_user_prompt
from journal_reflect.protocols import ModelCaller

logger = logging.getLogger(__name__)


class MalformedAnswerError(ValueError):
    """Raised when a model answer is missing one of its three parts."""


class ModelOrchestrator:
    """Calls the primary model and fails over to the fallback model.

    The orchestrator is stateless between calls: it only holds the model
    caller and the two model names.

    Example:
        ```python
        orchestrator = ModelOrchestrator.create(model_caller=OpenAIModelCaller.create())
        response = await orchestrator.reflect(ReflectionRequest(content=text))
        print(response.metadata.model)
        ```
    """

    def __init__(
        self,
        model_caller: ModelCaller,
        primary_model: str | None = None,
        fallback_model: str | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            model_caller: Backend used for both models (required).
            primary_model: Model tried first. Defaults to settings.
            fallback_model: Model tried once after a primary failure. Defaults to settings.
        """
        self._caller = model_caller
        self._primary = primary_model or settings.openai_model
        self._fallback = fallback_model or settings.openai_fallback_model

    @classmethod
    def create(
        cls,
        model_caller: ModelCaller,
        primary_model: str | None = None,
        fallback_model: str | None = None,
    ) -> "ModelOrchestrator":
        """Factory method to create ModelOrchestrator with models from settings."""
        return cls(
            model_caller=model_caller,
            primary_model=primary_model,
            fallback_model=fallback_model,
        )

    async def reflect(self, request: ReflectionRequest) -> ReflectionResponse:
        """Produce a reflection for ``request``.

        Args:
            request: The validated reflection request

        Returns:
            The reflection, with ``metadata.model`` naming the model that answered

        Raises:
            Exception: The fallback model's error when both models fail
        """
        start = time.monotonic()
        user_prompt = build_user_prompt(request.content)

        try:
            parts = await self._call(self._primary, user_prompt)
            model = self._primary
        except Exception as primary_error:
            logger.warning(
                "Primary model (%s) failed, trying fallback %s: %s",
                self._primary,
                self._fallback,
                primary_error,
            )
            try:
                parts = await self._call(self._fallback, user_prompt)
                model = self._fallback
            except Exception as fallback_error:
                logger.error(
                    "Both models failed: primary=%r fallback=%r",
                    primary_error,
                    fallback_error,
                )
                raise

        return ReflectionResponse(
            summary=parts.summary,
            pattern=parts.pattern,
            suggestion=parts.suggestion,
            metadata=ReflectionMetadata(
                model=model,
                processed_at=datetime.now(timezone.utc).isoformat(),
                processing_time_ms=int((time.monotonic() - start) * 1000),
            ),
        )

    async def _call(self, model: str, user_prompt: str) -> ReflectionParts:
        parts = await self._caller.call(model, SYSTEM_PROMPT, user_prompt)
        return self._normalize(parts, model)

    @staticmethod
    def _normalize(parts: ReflectionParts, model: str) -> ReflectionParts:
        """Trim the three parts and reject answers with an empty one."""
        summary = (parts.summary or "").strip()
        pattern = (parts.pattern or "").strip()
        suggestion = (parts.suggestion or "").strip()

        if not (summary and pattern and suggestion):
            raise MalformedAnswerError(f"Incomplete reflection from {model}")

        return ReflectionParts(summary=summary, pattern=pattern, suggestion=suggestion)

    @property
    def primary_model(self) -> str:
        return self._primary

    @property
    def fallback_model(self) -> str:
        return self._fallback

"""Service layer for business logic.

This layer contains the validation, admission control, model orchestration
and error classification that sit between the HTTP handlers and the
repositories. Services depend on protocols (interfaces), not concrete
implementations, making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (State / provider access)

Usage:
    ```python
    from journal_reflect.repositories import OpenAIModelCaller
    from journal_reflect.services import ModelOrchestrator, RateLimiter

    limiter = RateLimiter.create()
    orchestrator = ModelOrchestrator.create(model_caller=OpenAIModelCaller.create())
    ```
"""

from .error_classifier import ErrorClassifier
from .janitor import Janitor
from .model_orchestrator import MalformedAnswerError, ModelOrchestrator
from .rate_limiter import RateLimiter, client_id_from_headers
from .validator import validate_content, validate_request

__all__ = [
    "ErrorClassifier",
    "Janitor",
    "MalformedAnswerError",
    "ModelOrchestrator",
    "RateLimiter",
    "client_id_from_headers",
    "validate_content",
    "validate_request",
]

"""Journal Reflect - AI reflections on journal entries.

This package provides a layered architecture around a single endpoint,
``POST /api/reflect``, that turns a journal entry into a summary, a pattern
and a suggestion:

Layers:
    - protocols: Interface contracts (Clock, ModelCaller)
    - repositories: In-memory cache and provider access
    - services: Validation, rate limiting, model orchestration, error classification
    - handlers: The request lifecycle
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from journal_reflect.repositories import OpenAIModelCaller
    from journal_reflect.services import ModelOrchestrator

    orchestrator = ModelOrchestrator.create(model_caller=OpenAIModelCaller.create())
    ```

For HTTP API:
    ```python
    from journal_reflect.api.app import app
    ```
"""

__version__ = "0.1.0"

from journal_reflect.config import get_settings, settings
from journal_reflect.dto import ErrorResponse, ReflectionRequest, ReflectionResponse
from journal_reflect.entities import ErrorKind, ReflectionError, ReflectionParts
from journal_reflect.handlers import ReflectHandler
from journal_reflect.protocols import Clock, ModelCaller
from journal_reflect.repositories import ContentCache, OpenAIModelCaller, content_hash
from journal_reflect.services import (
    ErrorClassifier,
    Janitor,
    ModelOrchestrator,
    RateLimiter,
    validate_content,
)

__all__ = [
    "__version__",
    # Configuration
    "settings",
    "get_settings",
    # Protocols (interfaces)
    "Clock",
    "ModelCaller",
    # Services (business logic)
    "ErrorClassifier",
    "Janitor",
    "ModelOrchestrator",
    "RateLimiter",
    "validate_content",
    # Handlers
    "ReflectHandler",
    # Repositories
    "ContentCache",
    "OpenAIModelCaller",
    "content_hash",
    # Entities (domain models)
    "ErrorKind",
    "ReflectionError",
    "ReflectionParts",
    # DTOs (API contracts)
    "ErrorResponse",
    "ReflectionRequest",
    "ReflectionResponse",
]

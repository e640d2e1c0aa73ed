"""Repository layer for state and external access.

This layer holds the in-memory content cache and the adapters for external
dependencies (the model provider API, the system clock). Implementations are
protocol-based (structural typing), not inheritance-based: any class with the
required methods satisfies the protocol.
"""

from journal_reflect.protocols import Clock, ModelCaller

from .content_cache import ContentCache, content_hash
from .openai_model_caller import ModelCallError, OpenAIModelCaller
from .system_clock import SystemClock

__all__ = [
    "Clock",
    "ModelCaller",
    "ContentCache",
    "content_hash",
    "ModelCallError",
    "OpenAIModelCaller",
    "SystemClock",
]

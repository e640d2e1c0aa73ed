"""Model caller protocol.

Defines the interface for any language-model backend able to turn a system
prompt and a user prompt into the three parts of a reflection.

Implementations can include:
- OpenAI chat completions (default)
- Any OpenAI-compatible gateway (OpenRouter, vLLM, Ollama's /v1 API)
- Deterministic stubs for tests
"""

from typing import Protocol, runtime_checkable

from journal_reflect.entities import ReflectionParts


@runtime_checkable
class ModelCaller(Protocol):
    """Protocol for language-model backends.

    Similar to Go's interface pattern - any type that implements these
    methods satisfies the protocol, no explicit inheritance needed.
    """

    async def call(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
    ) -> ReflectionParts:
        """Ask ``model`` for a reflection.

        Args:
            model: Provider model identifier
            system_prompt: System message
            user_prompt: User message containing the journal entry

        Returns:
            The parsed summary, pattern and suggestion

        Raises:
            Exception: Any failure; its message is used for classification
        """
        ...

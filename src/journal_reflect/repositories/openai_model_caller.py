"""OpenAI-compatible implementation of the ModelCaller protocol.

Posts chat completions to ``{base_url}/chat/completions`` and parses the
free-text answer into the three reflection parts. Works against OpenAI and
any gateway exposing the same API (OpenRouter, vLLM, Ollama's ``/v1``).

Failures are raised as ``ModelCallError`` with messages shaped so the error
classifier can recognize them:
- timeouts read "Request timeout after {ms}ms"
- provider errors carry the HTTP status and the provider's error code
  (``rate_limit_exceeded``, ``insufficient_quota``, ``content_filter``, ...)
"""

import logging

import httpx

from journal_reflect.config import settings
from journal_reflect.entities import ReflectionParts
from journal_reflect.prompts import parse_reflection

logger = logging.getLogger(__name__)


class ModelCallError(RuntimeError):
    """A failed call to the model provider.

    Attributes:
        status_code: HTTP status returned by the provider, if any
        code: Provider error code, if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class OpenAIModelCaller:
    """OpenAI chat completions client.

    This class satisfies the ModelCaller protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        caller = OpenAIModelCaller.create()
        parts = await caller.call("gpt-4-1106-preview", SYSTEM_PROMPT, user_prompt)
        print(parts.summary)
        await caller.close()
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout_ms: int | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the model caller.

        Args:
            api_key: Provider API key. Defaults to settings.openai_api_key.
            base_url: API base URL. Defaults to settings.openai_base_url.
            max_tokens: Completion token limit. Defaults to settings.
            temperature: Sampling temperature. Defaults to settings.
            timeout_ms: Request timeout in milliseconds. Defaults to settings.
            client: Preconfigured HTTP client (for testing).
        """
        self._api_key = api_key or settings.openai_api_key
        self._base_url = (base_url or settings.openai_base_url).rstrip("/")
        self._max_tokens = max_tokens or settings.openai_max_tokens
        self._temperature = settings.openai_temperature if temperature is None else temperature
        self._timeout_ms = timeout_ms or settings.openai_timeout_ms
        self._client = client

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> "OpenAIModelCaller":
        """Factory method to create OpenAIModelCaller with defaults.

        Args:
            api_key: API key. If None, uses settings.
            base_url: API URL. If None, uses settings.

        Returns:
            Configured OpenAIModelCaller
        """
        return cls(api_key=api_key, base_url=base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout_ms / 1000,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def call(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
    ) -> ReflectionParts:
        """Request a reflection from ``model``.

        Args:
            model: Model identifier
            system_prompt: System message
            user_prompt: User message

        Returns:
            The parsed reflection parts

        Raises:
            ModelCallError: On missing credentials, timeout, transport
                failure, non-2xx status or an empty answer
        """
        if not self._api_key:
            raise ModelCallError("OPENAI_API_KEY environment variable is required")

        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        logger.debug("Requesting reflection from %s", model)

        try:
            response = await self.client.post(
                f"{self._base_url}/chat/completions",
                json=payload,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise ModelCallError(f"Request timeout after {self._timeout_ms}ms") from e
        except httpx.HTTPError as e:
            raise ModelCallError(f"Connection error: {e}") from e

        if response.is_error:
            raise self._provider_error(response)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            content = None

        if not content:
            raise ModelCallError("No response content from OpenAI", status_code=response.status_code)

        return parse_reflection(content)

    @staticmethod
    def _provider_error(response: httpx.Response) -> ModelCallError:
        """Build an error from a non-2xx provider response."""
        code = None
        message = response.reason_phrase or "error"
        try:
            error = response.json().get("error") or {}
            if isinstance(error, dict):
                code = error.get("code") or error.get("type")
                message = error.get("message") or message
        except (ValueError, AttributeError):
            pass

        prefix = f"{response.status_code} {code}" if code else str(response.status_code)
        return ModelCallError(
            f"{prefix}: {message}",
            status_code=response.status_code,
            code=code,
        )

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None

"""Classification of upstream failures into the error taxonomy.

Provider errors arrive as unstructured messages, so classification is a
best-effort substring heuristic, evaluated in a fixed precedence order.
The taxonomy and status codes are stable even where the heuristic is wrong.
"""

from journal_reflect.config import settings
from journal_reflect.entities import ErrorKind, ReflectionError

API_ERROR_RETRY_AFTER = 300


class ErrorClassifier:
    """Maps arbitrary exceptions to ``ReflectionError``.

    Rules (first match wins, on ``str(error)``):
    1. "content_filter" or "policy" -> content_policy (400)
    2. "timeout", any case -> timeout (504), retry after the provider timeout
    3. "rate", "quota" or "billing" -> api_error (503), retry after 300s
    4. anything else -> internal_error (500)
    """

    def __init__(
        self,
        timeout_retry_after: int | None = None,
        include_details: bool | None = None,
    ) -> None:
        """Initialize the classifier.

        Args:
            timeout_retry_after: Retry hint for timeouts in seconds. Defaults to the provider timeout.
            include_details: Attach raw error text to internal errors. Defaults to development mode.
        """
        self._timeout_retry_after = timeout_retry_after or settings.provider_timeout_seconds
        self._include_details = (
            settings.is_development if include_details is None else include_details
        )

    def classify(self, error: BaseException) -> ReflectionError:
        if isinstance(error, ReflectionError):
            return error

        message = str(error)

        if "content_filter" in message or "policy" in message:
            return ReflectionError(
                ErrorKind.CONTENT_POLICY,
                "Content violates usage policies. Please try with different content.",
            )

        if "timeout" in message.lower():
            return ReflectionError(
                ErrorKind.TIMEOUT,
                "Request timed out. Please try again.",
                retry_after=self._timeout_retry_after,
            )

        if "rate" in message or "quota" in message or "billing" in message:
            return ReflectionError(
                ErrorKind.API_ERROR,
                "AI service temporarily unavailable. Please try again later.",
                retry_after=API_ERROR_RETRY_AFTER,
            )

        return ReflectionError(
            ErrorKind.INTERNAL_ERROR,
            "An unexpected error occurred. Please try again.",
            details=repr(error) if self._include_details else None,
        )

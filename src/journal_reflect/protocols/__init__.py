"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the model provider (OpenAI, OpenRouter, a local server, ...)
- Unit testing with a fake clock and stub model callers
- Clear separation of concerns

Usage:
    ```python
    from journal_reflect.protocols import Clock, ModelCaller

    caller: ModelCaller = OpenAIModelCaller.create()
    clock: Clock = SystemClock()
    ```
"""

from .clock import Clock
from .model_caller import ModelCaller

__all__ = [
    "Clock",
    "ModelCaller",
]

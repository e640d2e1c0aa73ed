"""Handler layer for HTTP endpoints.

This layer composes the request lifecycle. Handlers depend on services and
repositories and raise ``ReflectionError`` for the routes to render.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (State / provider access)
"""

from .reflect_handler import ReflectHandler

__all__ = [
    "ReflectHandler",
]

"""
Per-request typed context.

``ExtensionMiddleware`` attaches an ``Extensions`` map to ``request.state``;
handlers pull a value out by its type with ``Depends(extension(SomeType))``.
Nothing is present unless a middleware inserted it.
"""

from typing import Any, Callable, Dict, Optional, Type, TypeVar

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from resource_api.errors import MissingExtensionError

T = TypeVar("T")


class Extensions:
    """Map from exact type to one value of that type."""

    def __init__(self):
        self._values: Dict[type, Any] = {}

    def insert(self, value: Any) -> Optional[Any]:
        """Store ``value`` under its type, returning the value it replaced."""
        previous = self._values.get(type(value))
        self._values[type(value)] = value
        return previous

    def get(self, extension_type: Type[T]) -> Optional[T]:
        return self._values.get(extension_type)

    def copy(self) -> "Extensions":
        other = Extensions()
        other._values = dict(self._values)
        return other

    def __contains__(self, extension_type: object) -> bool:
        return extension_type in self._values

    def __len__(self) -> int:
        return len(self._values)


class ExtensionMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, value: Any):
        super().__init__(app)
        self.value = value

    async def dispatch(self, request: Request, call_next):
        current = getattr(request.state, "extensions", None)
        extensions = current.copy() if current is not None else Extensions()
        extensions.insert(self.value)
        request.state.extensions = extensions
        return await call_next(request)


def extension(extension_type: Type[T]) -> Callable[[Request], T]:
    def resolve(request: Request) -> T:
        extensions = getattr(request.state, "extensions", None)
        value = extensions.get(extension_type) if extensions is not None else None
        if value is None:
            raise MissingExtensionError(extension_type)
        return value

    resolve.__name__ = f"extension_{extension_type.__name__}"
    return resolve

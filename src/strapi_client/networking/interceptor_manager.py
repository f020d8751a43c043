"""Ordered chains of fulfilled/rejected interceptors.

An :class:`InterceptorManager` is HTTP agnostic: the client keeps one for the
request phase and one for the response phase.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")

Interceptor = Callable[[T], T]
ErrorInterceptor = Callable[[Any], Any]


@dataclass(frozen=True)
class Handler(Generic[T]):
    fulfilled: Interceptor[T] | None = None
    rejected: ErrorInterceptor | None = None


class InterceptorManager(Generic[T]):
    """Manage and run a sequence of interceptors over a value.

    Insertion order is execution order. Running a chain never mutates it, so
    concurrent ``execute`` calls over an unchanging chain are safe.

    Example::

        manager = InterceptorManager[RequestPayload]()
        manager.use(add_trace_header).use(None, log_error)
        payload = manager.execute(RequestPayload(request=request))
    """

    def __init__(self, handlers: list[Handler[T]] | None = None) -> None:
        self._handlers: list[Handler[T]] = handlers if handlers is not None else []

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def handlers(self) -> tuple[Handler[T], ...]:
        return tuple(self._handlers)

    def use(
        self,
        fulfilled: Interceptor[T] | None = None,
        rejected: ErrorInterceptor | None = None,
    ) -> InterceptorManager[T]:
        """Append a handler to the chain and return the manager for chaining."""
        self._handlers.append(Handler(fulfilled=fulfilled, rejected=rejected))
        return self

    def clone(self) -> InterceptorManager[T]:
        """Return a manager with a copy of the handler list.

        Handlers themselves are shared; only the list is copied, so later
        ``use`` calls on either manager do not affect the other.
        """
        return type(self)(list(self._handlers))

    def execute(self, value: T) -> T:
        """Fold ``value`` through every fulfilled handler, left to right.

        When a fulfilled handler raises and the same handler has a rejected
        callback, the callback's return value replaces the running value and
        the chain continues. Otherwise the error propagates immediately and
        later handlers are skipped.
        """
        out = value
        for handler in self._handlers:
            try:
                if handler.fulfilled is not None:
                    out = handler.fulfilled(out)
            except Exception as exc:
                if handler.rejected is None:
                    raise
                out = handler.rejected(exc)
        return out

    def reject(self, error: Any) -> Any:
        """Fold ``error`` through the rejected handlers only."""
        out = error
        for handler in self._handlers:
            if handler.rejected is not None:
                out = handler.rejected(out)
        return out

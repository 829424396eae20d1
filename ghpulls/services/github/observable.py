"""
Cold, lazily evaluated sequences for the reactive client surface.

An ``Observable`` wraps a factory that produces an async iterator. Nothing
runs until the observable is iterated or subscribed, and every iteration or
subscription calls the factory again, so each consumer triggers its own
request. Items can be pulled (``async for``) or pushed to callbacks
(``subscribe``).
"""

import asyncio
import inspect
from collections.abc import AsyncIterator, Awaitable, Callable, Coroutine
from contextlib import aclosing
from typing import Any, Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")
U = TypeVar("U")


class Subscription:
    """Handle returned by ``Observable.subscribe``."""

    def __init__(self) -> None:
        self._task: "asyncio.Task[None] | None" = None
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def _start(self, coro: Coroutine[Any, Any, None]) -> None:
        self._task = asyncio.get_running_loop().create_task(coro)

    def dispose(self) -> None:
        """Stop delivery and cancel any request still in flight."""
        if not self._disposed:
            self._disposed = True
            if self._task is not None:
                self._task.cancel()

    async def wait(self) -> None:
        """
        Wait until the sequence completes, errors or is disposed.

        Re-raises the sequence error when the subscriber gave no ``on_error``.
        """
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._disposed:
                raise


class Observable(Generic[T]):
    """A cold sequence of items produced on demand."""

    def __init__(self, factory: Callable[[], AsyncIterator[T]]) -> None:
        self._factory = factory

    @classmethod
    def from_async_iterable(cls, factory: Callable[[], AsyncIterator[T]]) -> "Observable[T]":
        return cls(factory)

    @classmethod
    def from_coroutine(cls, factory: Callable[[], Awaitable[T]]) -> "Observable[T]":
        """Emit the single result of ``factory()`` then complete."""

        async def single() -> AsyncIterator[T]:
            yield await factory()

        return cls(single)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        iterator = self._factory()
        try:
            async for item in iterator:
                yield item
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()

    def map(self, selector: Callable[[T], U]) -> "Observable[U]":
        """Return a new cold observable applying ``selector`` to each item."""

        async def mapped() -> AsyncIterator[U]:
            async with aclosing(self._iterate()) as items:
                async for item in items:
                    yield selector(item)

        return Observable(mapped)

    async def to_list(self) -> list[T]:
        """Run the sequence to completion and collect its items."""
        async with aclosing(self._iterate()) as items:
            return [item async for item in items]

    async def first(self) -> T:
        """Return the first item and stop the sequence."""
        async with aclosing(self._iterate()) as items:
            async for item in items:
                return item
        raise LookupError("Sequence completed without emitting an item")

    def subscribe(
        self,
        on_next: Callable[[T], Any],
        on_error: Callable[[BaseException], Any] | None = None,
        on_completed: Callable[[], Any] | None = None,
    ) -> Subscription:
        """
        Push items to callbacks from a task on the running event loop.

        Callbacks may be plain functions or coroutine functions. The sequence
        ends with exactly one ``on_completed`` or ``on_error`` call, unless the
        subscription is disposed first. Exceptions raised by ``on_next`` are
        not routed to ``on_error``; they fail the subscription task.

        Args:
            on_next: Called with every item, in order.
            on_error: Called with the error that terminated the sequence.
            on_completed: Called once the sequence has ended normally.

        Returns:
            A Subscription whose ``dispose()`` cancels delivery.
        """

        subscription = Subscription()

        async def run() -> None:
            async with aclosing(self._iterate()) as items:
                while not subscription.disposed:
                    try:
                        item = await anext(items)
                    except StopAsyncIteration:
                        break
                    except Exception as e:
                        if subscription.disposed:
                            return
                        if on_error is None:
                            raise
                        logger.debug("Observable terminated with error", error=str(e))
                        await _invoke(on_error, e)
                        return
                    # Items already fetched are dropped once disposed
                    if subscription.disposed:
                        return
                    await _invoke(on_next, item)

            if on_completed is not None and not subscription.disposed:
                await _invoke(on_completed)

        subscription._start(run())
        return subscription


async def _invoke(callback: Callable[..., Any], *args: Any) -> None:
    result = callback(*args)
    if inspect.isawaitable(result):
        await result

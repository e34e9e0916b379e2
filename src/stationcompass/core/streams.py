"""
Push-style sample streams.

Platform sensors (location, orientation) deliver samples whenever they like. We model
each one as a `SampleStream`: producers call `push()` / `fail()`, consumers call
`subscribe()` and keep the returned `Subscription` so they can release it when the
display is torn down.

Delivery is synchronous and unbuffered: every pushed sample goes straight to the
current subscribers and is then forgotten (last sample wins).
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SampleCallback = Callable[[T], None]
ErrorCallback = Callable[[BaseException], None]


class Subscription:
    """Teardown handle returned by `SampleStream.subscribe()`."""

    def __init__(self, cancel: Callable[[], None]):
        self._cancel: Callable[[], None] | None = cancel

    @property
    def active(self) -> bool:
        return self._cancel is not None

    def unsubscribe(self) -> None:
        """Stop delivery. Safe to call more than once."""
        cancel, self._cancel = self._cancel, None
        if cancel is not None:
            cancel()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class _Subscriber(Generic[T]):
    __slots__ = ("on_sample", "on_error", "cancelled")

    def __init__(self, on_sample: SampleCallback[T], on_error: ErrorCallback | None):
        self.on_sample = on_sample
        self.on_error = on_error
        self.cancelled = False


class SampleStream(Generic[T]):
    """A single-threaded push stream with an optional terminal failure."""

    def __init__(self, name: str = "stream"):
        self.name = name
        self._subscribers: list[_Subscriber[T]] = []
        self._error: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self._error is not None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(
        self, on_sample: SampleCallback[T], on_error: ErrorCallback | None = None
    ) -> Subscription:
        """Register callbacks; a stream that already failed reports the failure immediately.

        The handle returned for a failed stream is already released.
        """
        if self._error is not None:
            if on_error is not None:
                on_error(self._error)
            released = Subscription(lambda: None)
            released.unsubscribe()
            return released

        sub = _Subscriber(on_sample, on_error)
        self._subscribers.append(sub)
        logger.debug("%s: subscriber added (%d total)", self.name, len(self._subscribers))

        def _cancel() -> None:
            sub.cancelled = True
            if sub in self._subscribers:
                self._subscribers.remove(sub)
                logger.debug("%s: subscriber removed (%d left)", self.name, len(self._subscribers))

        return Subscription(_cancel)

    def push(self, sample: T) -> None:
        """Deliver one sample to every current subscriber."""
        if self._error is not None:
            raise RuntimeError(f"{self.name}: cannot push after the stream failed")
        # Iterate a copy so callbacks may unsubscribe; anyone released mid-push is skipped.
        for sub in list(self._subscribers):
            if not sub.cancelled:
                sub.on_sample(sample)

    def fail(self, error: BaseException) -> None:
        """Terminate the stream with `error` and drop all subscribers."""
        if self._error is not None:
            return
        self._error = error
        subscribers, self._subscribers = self._subscribers, []
        logger.info("%s: failed with %s", self.name, type(error).__name__)
        for sub in subscribers:
            if sub.on_error is not None and not sub.cancelled:
                sub.on_error(error)

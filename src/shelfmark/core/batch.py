# ABOUTME: Sequential batch runner that can be stopped between items.
# ABOUTME: Used by the CLI so Ctrl-C ends a run after the current book, never in the middle of one.

import logging
import signal
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BatchResult(Generic[T]):
    """Items processed, failed, and left over when a batch stopped."""

    processed: list[T] = field(default_factory=list)
    failed: list[tuple[T, Exception]] = field(default_factory=list)
    remaining: list[T] = field(default_factory=list)

    @property
    def stopped_early(self) -> bool:
        return bool(self.remaining)


def run_batch(
    items: Iterable[T],
    process: Callable[[T], object],
    *,
    should_stop: Callable[[], bool] = lambda: False,
    catch: tuple[type[Exception], ...] = (),
) -> BatchResult[T]:
    """Process items one at a time, checking ``should_stop`` between them.

    Exceptions listed in ``catch`` mark that item failed and the batch
    moves on; anything else propagates.
    """
    result: BatchResult[T] = BatchResult()
    queue = list(items)
    for position, item in enumerate(queue):
        if should_stop():
            result.remaining = queue[position:]
            break
        try:
            process(item)
        except catch as exc:
            result.failed.append((item, exc))
            continue
        result.processed.append(item)
    return result


class StopRequest:
    """Two-stage SIGINT handling for batch runs.

    The first Ctrl-C asks the batch to stop after the current item; the
    second exits immediately. Use as a context manager around the batch.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._signal_count = 0
        self._previous: Any = None

    def is_set(self) -> bool:
        return self._event.is_set()

    def request(self) -> None:
        self._event.set()

    def _handler(self, signum: int, frame: Any) -> None:
        self._signal_count += 1
        if self._signal_count == 1:
            logger.warning("Stopping after the current book...")
            self._event.set()
        else:
            logger.warning("Forced shutdown. Exiting immediately.")
            raise SystemExit(1)

    def __enter__(self) -> "StopRequest":
        try:
            self._previous = signal.signal(signal.SIGINT, self._handler)
        except (OSError, ValueError):
            # signal handlers can only be set in main thread
            logger.debug("Could not set SIGINT handler (not main thread)")
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._previous is not None:
            signal.signal(signal.SIGINT, self._previous)
            self._previous = None

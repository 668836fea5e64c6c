"""
Progress hand-off between the download loop and whoever renders it.

The download loop puts integer percentages into a bounded ProgressChannel;
a ProgressObserver thread drains the channel and hands each value to a
callback. Closing the channel lets the observer finish deterministically.
"""

import queue
import threading
from typing import Callable, Iterator, Optional, Protocol

_CLOSED = object()


class ProgressSink(Protocol):
    """Anything that accepts progress percentages."""

    def put(self, progress: int) -> None: ...


class ProgressChannel:
    """
    Bounded queue of progress percentages with an explicit close.

    put() blocks while the queue is full. Iterating yields values until
    close() has been called and everything before it has been consumed.
    """

    def __init__(self, maxsize: int = 64):
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, progress: int) -> None:
        if self._closed:
            raise ValueError("put() on a closed progress channel")
        self._queue.put(progress)

    def close(self) -> None:
        """Signal that no more values will be sent. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[int]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]


class ProgressObserver:
    """
    Drains a ProgressChannel on a background thread.

    The callback sees each value once, in order; on_close runs after the
    channel is closed and drained.
    """

    def __init__(
        self,
        channel: ProgressChannel,
        callback: Callable[[int], None],
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.channel = channel
        self.callback = callback
        self.on_close = on_close
        self.last_progress = 0
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, name="nym-progress", daemon=True)

    def _run(self) -> None:
        try:
            for progress in self.channel:
                # keep draining after a failed callback so the producer never blocks on a full queue
                if self.error is not None or progress <= self.last_progress:
                    continue
                self.last_progress = progress
                try:
                    self.callback(progress)
                except Exception as e:
                    self.error = e
        finally:
            if self.on_close is not None:
                self.on_close()

    def start(self) -> "ProgressObserver":
        self._thread.start()
        return self

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the observer; re-raises the first callback failure."""
        self._thread.join(timeout)
        if self.error is not None:
            raise self.error

    def __enter__(self) -> "ProgressObserver":
        return self.start()

    def __exit__(self, *args: object) -> None:
        self.channel.close()
        self.join()

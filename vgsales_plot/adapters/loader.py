from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
import logging
import threading
from typing import TYPE_CHECKING

from vgsales_plot.adapters.sources import DataSource
from vgsales_plot.errors import LoadError

if TYPE_CHECKING:
    from vgsales_plot.controller import InteractionController


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadCompletion:
    request_id: int
    rows: list[Mapping[str, object]] | None = None
    error: Exception | None = None


class BackgroundLoader:
    """Fetches data sources on worker threads and queues the results.

    Completions are applied by whoever calls `pump`, on that caller's thread,
    so controller state is only ever touched from one place. Staleness is
    decided by the controller's request ids, not by completion order.
    """

    def __init__(self) -> None:
        self._queue: deque[LoadCompletion] = deque()
        self._lock = threading.Lock()
        self._threads: list[threading.Thread] = []

    def submit(self, controller: InteractionController, source: DataSource) -> int:
        request_id = controller.begin_load()
        thread = threading.Thread(
            target=self._run,
            args=(request_id, source),
            name=f"vgsales-load-{request_id}",
            daemon=True,
        )
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()
        return request_id

    def poll_completions(self, max_items: int = 16) -> list[LoadCompletion]:
        if max_items <= 0:
            raise ValueError("max_items must be > 0")
        out: list[LoadCompletion] = []
        with self._lock:
            while self._queue and len(out) < max_items:
                out.append(self._queue.popleft())
        return out

    def pending_count(self) -> int:
        with self._lock:
            return len(self._queue)

    def pump(self, controller: InteractionController, max_items: int = 16) -> int:
        """Apply queued completions to `controller`; returns how many were taken off the queue."""

        completions = self.poll_completions(max_items)
        for completion in completions:
            if completion.error is not None:
                controller.fail_load(completion.request_id, completion.error)
            elif completion.rows is not None:
                controller.finish_load(completion.request_id, completion.rows)
        return len(completions)

    def join(self, timeout: float | None = None) -> None:
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout=timeout)

    def _run(self, request_id: int, source: DataSource) -> None:
        try:
            completion = LoadCompletion(request_id=request_id, rows=source.fetch())
        except LoadError as exc:
            completion = LoadCompletion(request_id=request_id, error=exc)
        except Exception as exc:  # worker boundary: surface anything else as a load failure
            LOGGER.exception("load %d raised unexpectedly", request_id)
            completion = LoadCompletion(request_id=request_id, error=LoadError(str(exc)))
        with self._lock:
            self._queue.append(completion)

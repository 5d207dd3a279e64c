"""Background job wrapper — runs the optimizer off the caller's thread.

Message contract (see ``models.messages``): invalid inputs produce a single
``error`` message.  Otherwise an initial ``progress`` message
at 0/total, throttled ``progress`` messages while grid points complete,
then exactly one ``result`` (possibly partial, after ``cancel()``) or one
``error`` message.

Usage::

    job = GridSearchJob(WorkerRequest(params=params, config=config))
    for msg in job.messages():
        ...
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterator
from concurrent.futures import Future, ThreadPoolExecutor

from evcs_optimizer.engine.optimizer import count_grid_points, run_grid_search
from evcs_optimizer.engine.validation import validate_inputs
from evcs_optimizer.models.messages import WorkerProgress, WorkerRequest, WorkerResponse

logger = logging.getLogger(__name__)


class GridSearchJob:
    """One grid search request executed on a dedicated background thread."""

    def __init__(
        self,
        request: WorkerRequest,
        progress_every: int = 3,
        workers: int | None = None,
    ):
        self.request = request
        self.progress_every = max(1, progress_every)
        self.workers = workers
        self._outbox: queue.Queue[WorkerResponse] = queue.Queue()
        self._cancelled = threading.Event()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="grid-search")
        self._future: Future | None = None

    def start(self) -> GridSearchJob:
        if self._future is None:
            self._future = self._executor.submit(self._run)
        return self

    def cancel(self) -> None:
        """Stop after the grid point currently being evaluated."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def messages(self) -> Iterator[WorkerResponse]:
        """Yield messages until the terminal ``result`` or ``error``."""
        self.start()
        finished = False
        try:
            while True:
                msg = self._outbox.get()
                yield msg
                if msg.type != "progress":
                    finished = True
                    return
        finally:
            # Consumer went away early (e.g. client disconnect).
            if not finished:
                self.cancel()
            self._executor.shutdown(wait=True)

    # ── Background thread ───────────────────────────────────────────────

    def _post_progress(self, completed: int, total: int) -> None:
        self._outbox.put(WorkerResponse(
            type="progress",
            progress=WorkerProgress(
                stage="running",
                completed=completed,
                total=total,
                message=f"Simulating {completed}/{total}",
            ),
        ))

    def _run(self) -> None:
        params, config = self.request.params, self.request.config
        try:
            validate_inputs(params, config)
            total = count_grid_points(config)
            self._post_progress(0, total)

            def on_progress(completed: int, total: int) -> None:
                if completed % self.progress_every == 0 or completed == total:
                    self._post_progress(completed, total)

            outcome = run_grid_search(
                params, config, on_progress,
                workers=self.workers,
                should_stop=self._cancelled.is_set,
            )
            completed = len(outcome.results)
            self._outbox.put(WorkerResponse(
                type="result",
                results=outcome.results,
                best=outcome.best,
                progress=WorkerProgress(
                    stage="done",
                    completed=completed,
                    total=total,
                    message="Cancelled" if completed < total else "Done",
                ),
            ))
        except Exception as exc:
            logger.exception("Grid search job failed")
            self._outbox.put(WorkerResponse(
                type="error",
                error=str(exc),
                progress=WorkerProgress(stage="error", completed=0, total=0, message="Error"),
            ))


def run_request(
    request: WorkerRequest,
    progress_every: int = 3,
    workers: int | None = None,
) -> list[WorkerResponse]:
    """Run a request to completion and return every message it produced."""
    return list(GridSearchJob(request, progress_every, workers).messages())

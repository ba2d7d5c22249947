"""Run simulations off the caller's thread.

An editor must stay responsive while a program runs, so it hands source
text to an `EvaluationSession`, which evaluates on a small thread pool.
Each submission gets its own `EvaluationTask` with a private cancel event.
Cancelling is cooperative: the interpreter notices at its next statement
or loop iteration and finishes with a `Cancelled` error.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .config import DEFAULT_LIMITS, Limits
from .interpreter import RunResult, simulate


class EvaluationTask:
    def __init__(self, future: 'Future[RunResult]', cancel_event: threading.Event):
        self.future = future
        self.cancel_event = cancel_event

    def cancel(self):
        # The future itself is left alone so result() always yields a
        # RunResult; a task that has not started yet stops at its first step.
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> RunResult:
        return self.future.result(timeout=timeout)


class EvaluationSession:
    def __init__(self, limits: Optional[Limits] = None, max_workers: int = 2,
                 timestamp: float = 0.0):
        self.limits = limits or DEFAULT_LIMITS
        self.timestamp = timestamp
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix='oruspad-eval')

    def submit(self, source: str, mode: str = 'normal') -> EvaluationTask:
        cancel_event = threading.Event()
        future = self._executor.submit(
            simulate, source, mode, self.limits, cancel_event, self.timestamp,
        )
        return EvaluationTask(future, cancel_event)

    def close(self):
        self._executor.shutdown(wait=True)

    def __enter__(self) -> 'EvaluationSession':
        return self

    def __exit__(self, *exc_info):
        self.close()

"""
=============================================================================
WORKER POOL
=============================================================================

A fixed set of worker threads draining a shared queue of tasks. The
listener submits one task per accepted connection; whichever worker is
free takes it and runs it to completion.

=============================================================================
WHY A FIXED POOL?
=============================================================================

    Thread-per-connection:
    ──────────────────────
        for conn in accept_connections():
            Thread(target=handle, args=(conn,)).start()

        10,000 connections = 10,000 threads. Nothing bounds the damage.

    Fixed pool:
    ───────────
        pool = WorkerPool(workers=10)
        pool.start()
        for conn in accept_connections():
            pool.submit(handle, args=(conn,))

        At most 10 connections are processed at once. The rest wait in
        the queue, in arrival order.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         WorkerPool                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   submit(task) ──►  ┌───┬───┬───┬───┬───┐                          │
    │                     │ T │ T │ T │ T │...│   queue.Queue             │
    │                     └─┬─┴───┴───┴───┴───┘   (unbounded by default)  │
    │                       │                                              │
    │          ┌────────────┼────────────┬──────────────┐                 │
    │          ▼            ▼            ▼              ▼                 │
    │     Worker-0     Worker-1     Worker-2  ...  Worker-9               │
    │                                                                      │
    │   Each worker: get() → run task → task_done() → repeat              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
QUEUE POLICY
=============================================================================

    queue_size=0 (default)   Unbounded. submit() never blocks or fails;
                             under overload connections simply wait.

    queue_size=N, block=True  submit() waits for a free slot. The accept
                              loop stalls, and the kernel's listen backlog
                              absorbs new clients.

    queue_size=N, block=False submit() returns False immediately; the
                              caller rejects the connection.

=============================================================================
FAULT ISOLATION
=============================================================================

A task that raises is logged with its traceback and counted as failed.
The worker then goes back to the queue. One bad connection never takes
down a worker, the pool, or any other connection.

=============================================================================
"""

import threading
import queue
import time
import logging
from typing import Callable, Optional, Any
from dataclasses import dataclass, field
from enum import Enum


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """Worker thread states, for monitoring."""
    IDLE = "idle"        # Waiting for a task
    BUSY = "busy"        # Executing a task
    STOPPED = "stopped"  # Thread exited


@dataclass
class Task:
    """
    A deferred function call: "call func(*args, **kwargs) later".

    Attributes:
        func: The function to execute.
        args: Positional arguments.
        kwargs: Keyword arguments.
        submitted_at: When the task was queued (for wait-time logging).
    """
    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.monotonic)


class Worker(threading.Thread):
    """
    Worker thread that processes tasks from the queue.

    Loop:
        1. Wait for a task (blocking, with idle_timeout to notice shutdown)
        2. None is a poison pill → exit
        3. Execute the task, catching everything it raises
        4. task_done(), back to 1
    """

    def __init__(self, task_queue: queue.Queue, worker_id: int, idle_timeout: float = 1.0):
        """
        Args:
            task_queue: Queue to pull tasks from.
            worker_id: Identifier used in the thread name and logs.
            idle_timeout: Seconds between shutdown checks while idle.
        """
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.task_queue = task_queue
        self.worker_id = worker_id
        self.idle_timeout = idle_timeout

        self.state = WorkerState.IDLE
        self._shutdown = threading.Event()

        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while not self._shutdown.is_set():
            try:
                task = self.task_queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                continue

            try:
                if task is None:
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        """Run one task with state tracking, timing and fault isolation."""
        self.state = WorkerState.BUSY
        start_time = time.monotonic()
        waited = start_time - task.submitted_at

        try:
            task.func(*task.args, **task.kwargs)

            elapsed = time.monotonic() - start_time
            logger.debug(
                f"Worker {self.worker_id} completed task in {elapsed:.3f}s "
                f"(queued {waited:.3f}s)"
            )
            self.tasks_completed += 1

        except Exception as e:
            elapsed = time.monotonic() - start_time
            logger.exception(
                f"Worker {self.worker_id} task failed after {elapsed:.3f}s: {e}"
            )
            self.tasks_failed += 1

        finally:
            self.state = WorkerState.IDLE

    def shutdown(self):
        """Signal the worker to stop."""
        self._shutdown.set()


class WorkerPool:
    """
    Fixed-size thread pool.

    Usage:
        pool = WorkerPool(workers=10)
        pool.start()
        pool.submit(process_connection, args=(conn,))
        pool.stats        # {"workers": {...}, "tasks": {...}}
        pool.shutdown()   # waits for queued tasks
    """

    def __init__(
        self,
        workers: int = 10,
        queue_size: int = 0,
        idle_timeout: float = 1.0,
    ):
        """
        Args:
            workers: Number of worker threads, fixed for the pool's life.
            queue_size: Maximum queued tasks. 0 means unbounded.
            idle_timeout: Seconds between shutdown checks for idle workers.
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        if queue_size < 0:
            raise ValueError(f"queue_size must be >= 0, got {queue_size}")

        self.size = workers
        self.max_queue_size = queue_size
        self.idle_timeout = idle_timeout

        self._task_queue: "queue.Queue[Optional[Task]]" = queue.Queue(maxsize=queue_size)
        self._workers: list[Worker] = []
        self._lock = threading.Lock()
        self._started = False
        self._shutdown = False
        self._rejected = 0

    @property
    def is_running(self) -> bool:
        return self._started and not self._shutdown

    def start(self):
        """Create and start all workers. Calling it twice is a no-op."""
        with self._lock:
            if self._started:
                return

            logger.info(f"Starting worker pool with {self.size} workers")

            for worker_id in range(self.size):
                worker = Worker(
                    task_queue=self._task_queue,
                    worker_id=worker_id,
                    idle_timeout=self.idle_timeout,
                )
                self._workers.append(worker)
                worker.start()

            self._started = True

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        block: bool = True,
        queue_timeout: Optional[float] = None,
    ) -> bool:
        """
        Queue a task for execution.

        Args:
            func: The function to execute.
            args: Positional arguments for the function.
            kwargs: Keyword arguments for the function.
            block: Wait for space when a bounded queue is full.
            queue_timeout: Longest wait for space when blocking.

        Returns:
            True if the task was queued, False if a bounded queue was full.

        Raises:
            RuntimeError: If the pool is not started or is shutting down.
        """
        if not self._started:
            raise RuntimeError("Worker pool not started")
        if self._shutdown:
            raise RuntimeError("Worker pool is shutting down")

        task = Task(func=func, args=args, kwargs=kwargs or {})

        try:
            self._task_queue.put(task, block=block, timeout=queue_timeout)
            return True
        except queue.Full:
            with self._lock:
                self._rejected += 1
            return False

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Shut down the pool.

        1. Reject new tasks
        2. If wait: let queued tasks finish (up to timeout)
        3. Send one poison pill per worker and join them

        Args:
            wait: Whether to let queued tasks run first.
            timeout: Longest time to wait for the queue to drain.
        """
        with self._lock:
            if not self._started or self._shutdown:
                return
            self._shutdown = True

        logger.info("Shutting down worker pool...")

        if wait:
            deadline = None if timeout is None else time.monotonic() + timeout
            while self._task_queue.unfinished_tasks:
                if deadline is not None and time.monotonic() > deadline:
                    logger.warning("Worker pool shutdown timed out, abandoning queued tasks")
                    break
                time.sleep(0.05)

        for worker in self._workers:
            worker.shutdown()
            try:
                self._task_queue.put(None, block=False)
            except queue.Full:
                pass  # Worker sees the shutdown flag after idle_timeout

        for worker in self._workers:
            worker.join(timeout=2.0)

        logger.info("Worker pool shutdown complete")

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def idle_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.IDLE)

    @property
    def queued(self) -> int:
        """Tasks waiting for a worker."""
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        """
        Worker and task counts, for logging and tests.
        """
        return {
            "workers": {
                "total": len(self._workers),
                "busy": self.busy_workers,
                "idle": self.idle_workers,
            },
            "tasks": {
                "queued": self.queued,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
                "rejected": self._rejected,
            },
        }

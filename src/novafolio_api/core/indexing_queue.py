"""Bounded worker pool that rebuilds page indexes off the request path."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from .exceptions import DocumentNotFound, ExtractionError, IndexingQueueFull, UnsupportedMediaType
from .job_manager import COMPLETED, FAILED, PENDING, PROCESSING, Job, JobManager
from .page_index import PageIndex

logger = logging.getLogger(__name__)

JOB_TYPE = "reindex"

# Failures that another attempt cannot fix
PERMANENT_ERRORS = (DocumentNotFound, ExtractionError, UnsupportedMediaType)


@dataclass
class IndexingTask:
    job_id: str
    document_id: str
    mime: str
    path: Union[str, Path]


class IndexingQueue:
    """asyncio queue consumed by a fixed number of worker tasks.

    Every submission is tracked as a ``Job`` in the ``JobManager``. A
    submission for a document that already has a job waiting in the queue
    returns that job instead of enqueuing a second one.
    """

    def __init__(
        self,
        page_index: PageIndex,
        job_manager: JobManager,
        *,
        workers: int = 2,
        maxsize: int = 256,
        max_retries: int = 0,
        retry_backoff: float = 1.0,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.page_index = page_index
        self.jobs = job_manager
        self._workers = workers
        self._queue: asyncio.Queue = asyncio.Queue(maxsize)
        self._tasks: List[asyncio.Task] = []
        self._pending: Dict[str, Job] = {}
        self._done_events: Dict[str, asyncio.Event] = {}
        self._max_retries = max(0, max_retries)
        self._retry_backoff = max(0.0, retry_backoff)
        self._active = 0
        self._completed = 0
        self._failed = 0
        self._stopped = False

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def start(self):
        """Start worker tasks on the running event loop."""
        if self._tasks:
            return
        self._stopped = False
        self._tasks = [
            asyncio.create_task(self._run(), name=f"indexing-worker-{idx}")
            for idx in range(self._workers)
        ]
        logger.info(f"Started {self._workers} indexing workers")

    async def stop(self):
        """Cancel workers; jobs still queued are marked failed.

        Later submissions are rejected until ``start`` is called again.
        """
        self._stopped = True
        if not self._tasks:
            return
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
        for job_id in list(self._done_events):
            self._finish(job_id, FAILED, error="shutdown")
        self._pending.clear()
        logger.info("Stopped indexing workers")

    def submit(self, document_id: str, mime: str, path: Union[str, Path]) -> Job:
        """Queue a document for (re)indexing.

        Raises:
            IndexingQueueFull: If the backlog is at capacity or the queue
                has been stopped
        """
        if self._stopped:
            logger.warning(f"Indexing queue stopped, rejected document {document_id}")
            raise IndexingQueueFull("Indexing queue is stopped")

        queued = self._pending.get(document_id)
        if queued is not None and queued.status == PENDING:
            logger.info(f"Coalesced reindex of document {document_id} onto job {queued.job_id}")
            return queued

        if not self._tasks:
            self.start()

        job = self.jobs.create_job(JOB_TYPE, document_id)
        try:
            self._queue.put_nowait(IndexingTask(job.job_id, document_id, mime, path))
        except asyncio.QueueFull as e:
            self.jobs.delete_job(job.job_id)
            logger.warning(f"Indexing queue full, rejected document {document_id}")
            raise IndexingQueueFull("Indexing queue is full") from e

        self._pending[document_id] = job
        self._done_events[job.job_id] = asyncio.Event()
        return job

    async def wait(self, job_id: str, timeout: Optional[float] = None) -> Optional[Job]:
        """Wait until a job completes or fails and return it."""
        job = self.jobs.get_job(job_id)
        if job is None or job.finished:
            return job
        event = self._done_events.get(job_id)
        if event is not None:
            await asyncio.wait_for(event.wait(), timeout)
        return self.jobs.get_job(job_id)

    async def wait_for_idle(self, timeout: Optional[float] = None) -> bool:
        """Wait until every queued task has been processed."""
        try:
            await asyncio.wait_for(self._queue.join(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    def stats(self) -> Dict[str, int]:
        return {
            "workers": len(self._tasks),
            "backlog": self._queue.qsize(),
            "active": self._active,
            "completed": self._completed,
            "failed": self._failed,
        }

    def _finish(self, job_id: str, status: str, result=None, error: Optional[str] = None):
        self.jobs.update_job(job_id, status, result=result, error=error)
        if status == COMPLETED:
            self._completed += 1
        else:
            self._failed += 1
        event = self._done_events.pop(job_id, None)
        if event is not None:
            event.set()

    async def _run(self):
        while True:
            task = await self._queue.get()
            self._active += 1
            try:
                await self._process(task)
            finally:
                self._active -= 1
                self._queue.task_done()

    async def _process(self, task: IndexingTask):
        queued = self._pending.get(task.document_id)
        if queued is not None and queued.job_id == task.job_id:
            del self._pending[task.document_id]

        job = self.jobs.get_job(task.job_id)
        if job is None:
            logger.warning(f"Dropping indexing task for unknown job {task.job_id}")
            return
        job.attempts += 1
        self.jobs.update_job(task.job_id, PROCESSING)

        try:
            pages = await self.page_index.reindex(task.document_id, task.mime, task.path)
        except PERMANENT_ERRORS as e:
            logger.warning(f"Indexing document {task.document_id} failed: {e}")
            self._finish(task.job_id, FAILED, error=str(e))
        except Exception as e:
            logger.exception(f"Indexing document {task.document_id} failed (attempt {job.attempts})")
            if job.attempts <= self._max_retries:
                await self._retry(task, job)
            else:
                self._finish(task.job_id, FAILED, error=str(e))
        else:
            self._finish(task.job_id, COMPLETED, result={"pages": pages})

    async def _retry(self, task: IndexingTask, job: Job):
        backoff = self._retry_backoff * job.attempts
        if backoff:
            await asyncio.sleep(backoff)
        try:
            self._queue.put_nowait(task)
        except asyncio.QueueFull:
            self._finish(task.job_id, FAILED, error="indexing queue full on retry")
            return
        self.jobs.update_job(task.job_id, PENDING)
        logger.info(f"Requeued document {task.document_id} (attempt {job.attempts + 1})")

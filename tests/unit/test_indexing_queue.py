"""Unit tests for the indexing worker pool."""

import asyncio

import pytest

from novafolio_api.core.exceptions import ExtractionError, IndexingQueueFull
from novafolio_api.core.indexing_queue import IndexingQueue
from novafolio_api.core.job_manager import JobManager


class FakePageIndex:
    """Records calls; optional per-document failures and a gate to hold workers."""

    def __init__(self, failures=None, gate=None):
        self.calls = []
        self.failures = dict(failures or {})
        self.gate = gate

    async def reindex(self, document_id, mime, path):
        if self.gate is not None:
            await self.gate.wait()
        self.calls.append(document_id)
        pending = self.failures.get(document_id)
        if pending:
            error = pending.pop(0)
            raise error
        return 3


@pytest.fixture
async def make_queue():
    queues = []

    def _make(page_index, **kwargs):
        queue = IndexingQueue(page_index, JobManager(), **kwargs)
        queues.append(queue)
        return queue

    yield _make
    for queue in queues:
        await queue.stop()


@pytest.mark.unit
class TestIndexingQueue:

    async def test_job_completes(self, make_queue):
        index = FakePageIndex()
        queue = make_queue(index, workers=1)

        job = queue.submit("doc-1", "application/pdf", "/tmp/doc-1.pdf")
        finished = await queue.wait(job.job_id, timeout=5)

        assert finished.status == "completed"
        assert finished.result == {"pages": 3}
        assert finished.attempts == 1
        assert index.calls == ["doc-1"]

    async def test_pending_jobs_for_same_document_coalesce(self, make_queue):
        gate = asyncio.Event()
        index = FakePageIndex(gate=gate)
        queue = make_queue(index, workers=1)

        blocker = queue.submit("doc-0", "application/pdf", "/tmp/0.pdf")
        await asyncio.sleep(0)
        first = queue.submit("doc-1", "application/pdf", "/tmp/1.pdf")
        second = queue.submit("doc-1", "application/pdf", "/tmp/1.pdf")
        gate.set()
        assert await queue.wait_for_idle(timeout=5)

        assert first is second
        assert index.calls == ["doc-0", "doc-1"]
        assert queue.jobs.get_job(blocker.job_id).status == "completed"

    async def test_full_queue_raises(self, make_queue):
        gate = asyncio.Event()
        queue = make_queue(FakePageIndex(gate=gate), workers=1, maxsize=1)

        queue.submit("doc-1", "application/pdf", "/tmp/1.pdf")
        await asyncio.sleep(0)
        queue.submit("doc-2", "application/pdf", "/tmp/2.pdf")
        with pytest.raises(IndexingQueueFull):
            queue.submit("doc-3", "application/pdf", "/tmp/3.pdf")

        gate.set()
        assert await queue.wait_for_idle(timeout=5)
        assert queue.stats()["completed"] == 2

    async def test_failure_is_recorded_not_raised(self, make_queue):
        index = FakePageIndex(failures={"doc-1": [RuntimeError("disk error")]})
        queue = make_queue(index, workers=1)

        job = queue.submit("doc-1", "application/pdf", "/tmp/1.pdf")
        finished = await queue.wait(job.job_id, timeout=5)

        assert finished.status == "failed"
        assert "disk error" in finished.error
        assert queue.stats()["failed"] == 1

    async def test_transient_failure_is_retried(self, make_queue):
        index = FakePageIndex(failures={"doc-1": [RuntimeError("locked")]})
        queue = make_queue(index, workers=1, max_retries=2, retry_backoff=0)

        job = queue.submit("doc-1", "application/pdf", "/tmp/1.pdf")
        await queue.wait_for_idle(timeout=5)

        assert queue.jobs.get_job(job.job_id).status == "completed"
        assert queue.jobs.get_job(job.job_id).attempts == 2
        assert index.calls == ["doc-1", "doc-1"]

    async def test_extraction_errors_are_not_retried(self, make_queue):
        index = FakePageIndex(failures={"doc-1": [ExtractionError("corrupt")]})
        queue = make_queue(index, workers=1, max_retries=3, retry_backoff=0)

        job = queue.submit("doc-1", "application/pdf", "/tmp/1.pdf")
        await queue.wait_for_idle(timeout=5)

        assert queue.jobs.get_job(job.job_id).status == "failed"
        assert index.calls == ["doc-1"]

    async def test_stop_fails_queued_jobs(self, make_queue):
        gate = asyncio.Event()
        queue = make_queue(FakePageIndex(gate=gate), workers=1)

        queue.submit("doc-1", "application/pdf", "/tmp/1.pdf")
        await asyncio.sleep(0)
        queued = queue.submit("doc-2", "application/pdf", "/tmp/2.pdf")
        await queue.stop()

        assert queue.jobs.get_job(queued.job_id).status == "failed"
        assert queue.jobs.get_job(queued.job_id).error == "shutdown"
        assert not queue.running

    def test_workers_must_be_positive(self):
        with pytest.raises(ValueError):
            IndexingQueue(FakePageIndex(), JobManager(), workers=0)

    async def test_submit_after_stop_is_rejected(self, make_queue):
        queue = make_queue(FakePageIndex(), workers=1)
        queue.start()
        await queue.stop()

        with pytest.raises(IndexingQueueFull):
            queue.submit("doc-1", "application/pdf", "/tmp/1.pdf")

        assert not queue.running
        assert queue.stats()["workers"] == 0

"""Unit tests for job tracking."""

from datetime import timedelta

import pytest

from novafolio_api.core.job_manager import JobManager


@pytest.mark.unit
class TestJobManager:

    def test_create_and_get(self):
        manager = JobManager()
        job = manager.create_job("reindex", document_id="doc-1")

        assert manager.get_job(job.job_id) is job
        assert job.status == "pending"
        assert job.to_dict()["document_id"] == "doc-1"

    def test_update_job(self):
        manager = JobManager()
        job = manager.create_job("reindex")

        manager.update_job(job.job_id, "completed", result={"pages": 3})

        assert job.status == "completed"
        assert job.finished
        assert job.result == {"pages": 3}

    def test_update_unknown_job_is_ignored(self):
        JobManager().update_job("missing", "failed")

    def test_counts_by_status(self):
        manager = JobManager()
        manager.create_job("reindex")
        done = manager.create_job("reindex")
        manager.update_job(done.job_id, "failed", error="boom")

        assert manager.counts_by_status() == {
            "pending": 1, "processing": 0, "completed": 0, "failed": 1,
        }

    async def test_cleanup_removes_only_old_finished_jobs(self):
        manager = JobManager()
        old_done = manager.create_job("reindex")
        old_pending = manager.create_job("reindex")
        recent_done = manager.create_job("reindex")
        manager.update_job(old_done.job_id, "completed")
        manager.update_job(recent_done.job_id, "completed")
        old_done.updated_at -= timedelta(hours=48)
        old_pending.updated_at -= timedelta(hours=48)

        await manager.cleanup_old_jobs(max_age_hours=24)

        assert manager.get_job(old_done.job_id) is None
        assert manager.get_job(old_pending.job_id) is old_pending
        assert manager.get_job(recent_done.job_id) is recent_done

    async def test_cleanup_task_start_stop(self):
        manager = JobManager()
        await manager.start_cleanup_task(interval_minutes=60)
        await manager.stop_cleanup_task()
        assert manager._cleanup_task is None

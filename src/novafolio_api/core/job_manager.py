"""Job tracking and management for async operations."""

import asyncio
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)

PENDING = "pending"
PROCESSING = "processing"
COMPLETED = "completed"
FAILED = "failed"
FINISHED_STATUSES = (COMPLETED, FAILED)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Job:
    """Represents an asynchronous job."""

    def __init__(self, job_id: str, job_type: str, document_id: Optional[str] = None):
        self.job_id = job_id
        self.job_type = job_type
        self.document_id = document_id
        self.status = PENDING  # pending, processing, completed, failed
        self.attempts = 0
        self.created_at = _now()
        self.updated_at = self.created_at
        self.result: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.status in FINISHED_STATUSES

    def update_status(self, status: str, result: Optional[Dict[str, Any]] = None,
                      error: Optional[str] = None):
        """Update job status and metadata."""
        self.status = status
        self.updated_at = _now()
        if result is not None:
            self.result = result
        if error is not None:
            self.error = error

    def to_dict(self) -> Dict[str, Any]:
        """Convert job to dictionary."""
        return {
            "job_id": self.job_id,
            "job_type": self.job_type,
            "document_id": self.document_id,
            "status": self.status,
            "attempts": self.attempts,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "result": self.result,
            "error": self.error
        }


class JobManager:
    """Manager for tracking async jobs."""

    def __init__(self):
        self.jobs: Dict[str, Job] = {}
        self._cleanup_task: Optional[asyncio.Task] = None

    def create_job(self, job_type: str, document_id: Optional[str] = None) -> Job:
        """Create and register a new pending job."""
        job = Job(str(uuid4()), job_type, document_id)
        self.jobs[job.job_id] = job
        logger.info(f"Created job {job.job_id} of type {job_type}")
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        """Get job by ID."""
        return self.jobs.get(job_id)

    def update_job(self, job_id: str, status: str, result: Optional[Dict[str, Any]] = None,
                   error: Optional[str] = None):
        """Update job status."""
        job = self.jobs.get(job_id)
        if job:
            job.update_status(status, result, error)
            logger.info(f"Updated job {job_id} to status {status}")
        else:
            logger.warning(f"Job {job_id} not found for update")

    def delete_job(self, job_id: str):
        """Delete a job."""
        if job_id in self.jobs:
            del self.jobs[job_id]
            logger.info(f"Deleted job {job_id}")

    def counts_by_status(self) -> Dict[str, int]:
        counts = Counter(job.status for job in self.jobs.values())
        return {status: counts.get(status, 0) for status in (PENDING, PROCESSING, COMPLETED, FAILED)}

    async def cleanup_old_jobs(self, max_age_hours: float = 24):
        """Clean up finished jobs older than specified hours."""
        now = _now()
        to_delete = [
            job_id for job_id, job in self.jobs.items()
            if job.finished and (now - job.updated_at).total_seconds() / 3600 > max_age_hours
        ]

        for job_id in to_delete:
            self.delete_job(job_id)

        if to_delete:
            logger.info(f"Cleaned up {len(to_delete)} old jobs")

    async def start_cleanup_task(self, interval_minutes: int = 60, max_age_hours: float = 24):
        """Start background task to clean up old jobs."""
        async def cleanup_loop():
            while True:
                await asyncio.sleep(interval_minutes * 60)
                await self.cleanup_old_jobs(max_age_hours)

        self._cleanup_task = asyncio.create_task(cleanup_loop())
        logger.info("Started job cleanup background task")

    async def stop_cleanup_task(self):
        """Stop the cleanup background task."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
            logger.info("Stopped job cleanup background task")

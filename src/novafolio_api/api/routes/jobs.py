"""Indexing job status endpoint."""

from fastapi import APIRouter, Depends
from ...core.exceptions import JobNotFound
from ...core.job_manager import JobManager
from ...models import JobStatus
from ..dependencies import get_job_manager

router = APIRouter(prefix="/v1/jobs", tags=["jobs"])


@router.get("/{job_id}", response_model=JobStatus, summary="Get Job Status")
async def get_job(job_id: str, jobs: JobManager = Depends(get_job_manager)):
    job = jobs.get_job(job_id)
    if job is None:
        raise JobNotFound(job_id)
    return JobStatus(**job.to_dict())

from __future__ import annotations

import itertools
import logging
import threading
from typing import Dict, List, Optional

from bgee_web.exceptions import TooManyJobsError
from bgee_web.models import Job

logger = logging.getLogger(__name__)


class JobService:
    """
    In-process registry of running jobs, shared between requests.

    Jobs are registered when started and stay registered until released,
    including after an interruption, so that their status can be checked.
    """

    def __init__(self, max_jobs_per_user: int = 0) -> None:
        # 0 means no limit.
        self.max_jobs_per_user = max_jobs_per_user
        self._jobs: Dict[int, Job] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def register_job(self, name: str, user_id: str, task_count: int = 0) -> Job:
        with self._lock:
            if self.max_jobs_per_user > 0:
                running = [
                    j for j in self._jobs.values() if j.user_id == user_id and not j.terminated
                ]
                if len(running) >= self.max_jobs_per_user:
                    raise TooManyJobsError(
                        f"User {user_id} already has {len(running)} running jobs "
                        f"(maximum {self.max_jobs_per_user})."
                    )
            job = Job(
                id=next(self._ids),
                name=name,
                user_id=user_id,
                task_count=task_count,
                release_callback=self._release_job,
            )
            self._jobs[job.id] = job
        logger.debug(f"Registered job {job.id} ({name!r}) for user {user_id}")
        return job

    def get_job(self, job_id: int) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def get_jobs(self, user_id: Optional[str] = None) -> List[Job]:
        with self._lock:
            jobs = list(self._jobs.values())
        if user_id is None:
            return jobs
        return [j for j in jobs if j.user_id == user_id]

    def cancel_job(self, job_id: int) -> Optional[Job]:
        """Request interruption of a job; return it, or None if it is unknown or already released."""
        job = self.get_job(job_id)
        if job is None:
            logger.debug(f"No job {job_id} to cancel")
            return None
        job.interrupt()
        logger.info(f"Interruption requested for job {job_id}")
        return job

    def _release_job(self, job: Job) -> None:
        with self._lock:
            self._jobs.pop(job.id, None)
        logger.debug(f"Released job {job.id}")


__all__ = ["JobService"]

# src/library/submitter.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from core.errors import NoValidJobs, SubmissionTransportError
from core.models import GenerationMode, JobSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobOutcome:
    job: JobSpec
    ok: bool
    error: Optional[str] = None
    response: Any = None


@dataclass(frozen=True)
class SubmissionResult:
    attempted: int
    outcomes: tuple[JobOutcome, ...]

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded


def valid_jobs(jobs: Iterable[JobSpec], mode: GenerationMode) -> list[JobSpec]:
    return [job for job in jobs if job.is_valid_for(mode)]


class BatchJobSubmitter:
    """
    Fire one generation request per valid job, all at once, and wait for every
    request to settle. Individual failures are recorded, not raised: whether a
    song actually got generated is discovered by a later library refresh.
    """

    def __init__(self, client, max_workers: Optional[int] = None):
        self.client = client
        self.max_workers = max_workers

    def prepare(self, jobs: Iterable[JobSpec], mode: GenerationMode) -> list[JobSpec]:
        """Drop jobs missing the mode's required field; raise NoValidJobs if none are left."""
        batch = valid_jobs(jobs, GenerationMode(mode))
        if not batch:
            raise NoValidJobs("Please fill in at least one form!")
        return batch

    def submit(self, jobs: Iterable[JobSpec], mode: GenerationMode) -> SubmissionResult:
        mode = GenerationMode(mode)
        batch = self.prepare(jobs, mode)

        send = self.client.custom_generate if mode is GenerationMode.CUSTOM else self.client.generate

        workers = self.max_workers or len(batch)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._dispatch, send, job, mode) for job in batch]
            outcomes = tuple(f.result() for f in futures)

        result = SubmissionResult(attempted=len(batch), outcomes=outcomes)
        logger.info(
            "Submitted %d %s job(s): %d accepted, %d failed",
            result.attempted, mode.value, result.succeeded, result.failed,
        )
        return result

    @staticmethod
    def _dispatch(send, job: JobSpec, mode: GenerationMode) -> JobOutcome:
        try:
            response = send(job.payload_for(mode))
        except SubmissionTransportError as e:
            logger.warning("Generation request failed: %s", e)
            return JobOutcome(job=job, ok=False, error=str(e))
        return JobOutcome(job=job, ok=True, response=response)

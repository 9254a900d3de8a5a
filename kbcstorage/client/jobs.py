import logging
import threading
from typing import Optional

from kbcstorage.client import KbcClient
from kbcstorage.client.endpoints import JobEndpoints
from kbcstorage.client.utils import parse_response, raise_on_error
from kbcstorage.exceptions import JobFailedError
from kbcstorage.models import JobID, StorageJob, StorageJobStatus
from kbcstorage.polling import PollingPolicy, poll_until

logger = logging.getLogger(__name__)


class JobAPI:
    r"""Typed API definition for asynchronous Storage jobs."""
    def __init__(self, client: KbcClient) -> None:
        self._client = client

    def get(self, job_id: JobID) -> StorageJob:
        resp = self._client._request(JobEndpoints.get.with_id(job_id))
        raise_on_error(resp)
        return parse_response(StorageJob, resp)

    def wait(
        self,
        job_id: JobID,
        policy: PollingPolicy = PollingPolicy(),
        cancel_event: Optional[threading.Event] = None,
    ) -> StorageJob:
        r"""Polls a job until it reaches a terminal status.

        Returns:
            The job report, whose status is ``success``.

        Raises:
            JobFailedError: if the job finished with status ``error``.
            PollingTimeoutError: if ``policy`` bounds were exceeded.
            PollingCancelledError: if ``cancel_event`` was set.
        """
        job = poll_until(
            lambda: self.get(job_id),
            lambda job: job.is_terminal,
            policy=policy,
            cancel_event=cancel_event,
            description=f"Storage job {job_id}",
        )
        if job.job_status != StorageJobStatus.SUCCESS:
            raise JobFailedError(str(job_id), job.error_message)

        logger.debug("Storage job %s succeeded", job_id)
        return job

"""Exceptions raised inside the analyzer package."""

from typing import Optional


class FetchError(Exception):
    """A page could not be retrieved (network failure, timeout, non-2xx)."""

    def __init__(self, message: str, *, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class JobNotFoundError(LookupError):
    """No analysis job exists for the requested id."""

    def __init__(self, job_id: int):
        super().__init__(f"Analysis {job_id} not found")
        self.job_id = job_id


class JobStateError(ValueError):
    """An update tried to move a job out of a terminal state."""

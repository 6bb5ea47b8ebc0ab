"""Errors raised while talking to the Mode REST API."""
from typing import Optional


class UpstreamError(Exception):
    """The Mode API could not be reached or returned an unusable body."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class UpstreamStatusError(UpstreamError):
    """The Mode API answered with a non-success HTTP status."""

    def __init__(self, status_code: int, url: str, body: str = ""):
        super().__init__(f"Mode API returned HTTP {status_code} for {url}", url=url)
        self.status_code = status_code
        self.body = body

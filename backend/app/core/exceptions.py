"""
Pipeline error types.

"Not applicable" outcomes (too short, too few samples) are not errors and
never raise; services return an empty result with a message instead.
"""
from typing import Optional


class AnalyticsError(Exception):
    """Base class for failures of a single pipeline invocation."""

    status_code = 500

    def __init__(
        self,
        message: str,
        activity_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.activity_id = activity_id
        self.user_id = user_id


class UpstreamDataError(AnalyticsError):
    """Raw rows are missing or malformed (activity not found, no detail rows)."""

    status_code = 404


class ComputationError(AnalyticsError):
    """A computation produced something unusable, e.g. NaN or Infinity."""

    status_code = 500

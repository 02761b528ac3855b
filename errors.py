from typing import Optional


class ReviewAgentError(Exception):
    """Base class for every failure raised by the review pipeline."""


class ConfigError(ReviewAgentError):
    pass


class DiffParseError(ReviewAgentError):
    """The diff text could not be split into files and hunks."""


class ModelInvocationError(ReviewAgentError):
    """The model provider call failed (network, quota, blocked prompt...)."""


class ResponseFormatError(ReviewAgentError):
    """The model answered, but not with the expected JSON shape."""


class HostAPIError(ReviewAgentError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

"""
Error types shared by the provider, the services and the API layer.

Every subclass of RemoMonitorError is rendered by the API as HTTP 500
with a ``{"message": ...}`` body, except NoDevicesError which the
endpoints translate to 404.
"""
from typing import Optional


class RemoMonitorError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(RemoMonitorError):
    """A required credential or connection setting is missing"""


class UpstreamError(RemoMonitorError):
    """The Nature Remo API answered with a non-2xx status or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.upstream_status = status_code
        self.body = body


class StoreError(RemoMonitorError):
    """The database rejected a read or a write"""


class NoDevicesError(RemoMonitorError):
    status_code = 404


def describe_store_error(exc: Exception) -> str:
    """Driver message of a database error, without the SQL statement or its parameters"""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else exc.__class__.__name__

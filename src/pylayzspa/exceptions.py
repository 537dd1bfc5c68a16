"""Custom exception hierarchy for pylayzspa."""

from __future__ import annotations


class LayzError(Exception):
    """Base exception for all pylayzspa errors."""


class LayzConfigError(LayzError):
    """Invalid or missing configuration."""


class LayzTransportError(LayzError):
    """Network-level failure reaching the cloud API."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class LayzRemoteRejectedError(LayzError):
    """Cloud API answered with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class LayzContractError(LayzError):
    """Response body did not have the expected shape.

    A ``latest`` response without the ``power`` attribute is *not* a
    contract error; it means the device is offline and is mapped to the
    idle state by the cache.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class LayzSafetyAbortError(LayzError):
    """An interlock prerequisite failed, so the dependent command was not sent.

    ``step`` is the command that was deliberately skipped and ``failed_step``
    the prerequisite whose push failed.  The original error is chained as
    ``__cause__``.
    """

    def __init__(self, message: str, *, step: str = "", failed_step: str = "") -> None:
        self.step = step
        self.failed_step = failed_step
        super().__init__(message)

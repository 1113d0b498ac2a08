from __future__ import annotations


class LaunchpadError(Exception):
    """Base class for errors raised by launchpad services."""


class UpstreamUnavailable(LaunchpadError):
    """Network error, timeout or non-2xx answer from a discovery upstream."""

    def __init__(self, upstream: str, reason: str) -> None:
        super().__init__(f"{upstream} unavailable: {reason}")
        self.upstream = upstream
        self.reason = reason


class MalformedUpstreamPayload(LaunchpadError):
    """Upstream answered, but the payload failed the required-shape check."""

    def __init__(self, upstream: str, reason: str) -> None:
        super().__init__(f"{upstream} payload malformed: {reason}")
        self.upstream = upstream
        self.reason = reason


class ConfigurationError(LaunchpadError):
    pass


class InvalidInput(LaunchpadError):
    pass

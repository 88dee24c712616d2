from typing import Protocol

from ccstatus.models import UsageLimits


class UsageLimitProvider(Protocol):
    """
    UsageLimitProvider stands as a common protocol for sources of
    rolling-window utilization. Implementations never raise for
    expected failures; they return empty limits instead.
    """

    @property
    def name(self) -> "str": ...

    async def fetch_limits(self) -> "UsageLimits": ...

    async def close(self) -> "None": ...

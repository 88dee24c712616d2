import json
from pathlib import Path

import httpx
import structlog

from ccstatus.models import NO_LIMITS, UsageLimits, UsageWindow

logger = structlog.get_logger()

USAGE_URL = "https://api.anthropic.com/api/oauth/usage"
OAUTH_BETA = "oauth-2025-04-20"


def read_access_token(path: "Path") -> "str | None":
    """
    reads the OAuth access token stored by the Claude CLI, or None
    when the file is missing or does not carry one.
    """
    try:
        with path.open(encoding="utf-8") as fh:
            creds = json.load(fh)
    except FileNotFoundError:
        return None
    except (OSError, ValueError):
        logger.debug("credentials_unreadable", path=str(path))
        return None

    oauth = creds.get("claudeAiOauth") if isinstance(creds, dict) else None
    if not isinstance(oauth, dict):
        return None
    return oauth.get("accessToken") or None


class AnthropicUsageProvider:
    """
    AnthropicUsageProvider implements the UsageLimitProvider protocol
    against the OAuth usage endpoint, which reports the 5-hour and
    7-day utilization of the signed-in subscription.
    """

    def __init__(
        self,
        credentials_path: "Path",
        url: "str" = USAGE_URL,
        timeout: "float" = 10.0,
    ) -> "None":
        self._credentials_path = credentials_path
        self._url = url
        self._client: "httpx.AsyncClient" = httpx.AsyncClient(
            timeout=timeout,
            headers={
                "Accept": "application/json",
                "anthropic-beta": OAUTH_BETA,
            },
        )

    @property
    def name(self) -> "str":
        return "anthropic"

    async def close(self) -> "None":
        """
        closes the underlying HTTP client.
        """
        await self._client.aclose()

    async def fetch_limits(self) -> "UsageLimits":
        token = read_access_token(self._credentials_path)
        if not token:
            logger.debug("usage_no_credentials", path=str(self._credentials_path))
            return NO_LIMITS

        try:
            resp = await self._client.get(
                self._url, headers={"Authorization": f"Bearer {token}"}
            )
        except httpx.HTTPError as exc:
            logger.debug("usage_request_failed", error=str(exc))
            return NO_LIMITS

        if not resp.is_success:
            logger.debug("usage_request_rejected", status=resp.status_code)
            return NO_LIMITS

        try:
            data = resp.json()
        except ValueError:
            logger.debug("usage_response_invalid")
            return NO_LIMITS
        if not isinstance(data, dict):
            return NO_LIMITS

        limits = UsageLimits(
            five_hour=UsageWindow.from_dict(data.get("five_hour")),
            seven_day=UsageWindow.from_dict(data.get("seven_day")),
        )
        logger.debug(
            "usage_limits_fetched",
            five_hour=limits.five_hour,
            seven_day=limits.seven_day,
        )
        return limits

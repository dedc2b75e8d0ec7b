"""
Stream Verifier

Probes stream URLs with a HEAD request and memoizes the verdict per URL.
"""
import logging

import httpx

from iptv_addon.config import DEFAULT_USER_AGENT
from iptv_addon.services.cache_store import CacheStore, verdict_key
from iptv_addon.utils.logging_helpers import log_verdict


logger = logging.getLogger(__name__)


class StreamVerifier:
    """
    Reachability check for candidate stream URLs.

    The verdict is keyed by URL alone: once cached it is returned for any
    user agent or referrer. Negative verdicts (including timeouts and
    transport errors) are cached exactly like positive ones.
    """

    def __init__(
        self,
        cache: CacheStore,
        client: httpx.AsyncClient,
        *,
        default_user_agent: str = DEFAULT_USER_AGENT,
        verdict_ttl: float = 0,
    ) -> None:
        self._cache = cache
        self._client = client
        self.default_user_agent = default_user_agent
        self._verdict_ttl = verdict_ttl

    async def verify(
        self,
        url: str,
        user_agent: str | None = None,
        referrer: str | None = None
    ) -> bool:
        """
        Check whether a stream URL answers with a 2xx status.

        Args:
            url: Stream URL to probe
            user_agent: User-Agent header, default device UA when None
            referrer: Optional Referer header

        Returns:
            True when reachable; never raises
        """
        key = verdict_key(url)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Verdict for %s served from cache: %s", url, cached)
            return cached

        verdict = await self._probe(url, user_agent, referrer)
        self._cache.set(key, verdict, ttl=self._verdict_ttl)
        return verdict

    async def _probe(self, url: str, user_agent: str | None, referrer: str | None) -> bool:
        headers = {
            "User-Agent": user_agent or self.default_user_agent,
            "Accept": "*/*",
        }
        if referrer:
            headers["Referer"] = referrer

        try:
            response = await self._client.head(url, headers=headers)
        except httpx.TimeoutException:
            log_verdict(logger, url, False, "timeout")
            return False
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            log_verdict(logger, url, False, type(e).__name__)
            return False

        verdict = response.is_success
        log_verdict(logger, url, verdict, f"HTTP {response.status_code}")
        return verdict

"""
Blog API - JSON Web Key Set Client
====================================

What:  Fetches and caches the identity provider's public signing keys.
How:   Keys are fetched with httpx from https://<AUTH_DOMAIN>/.well-known/jwks.json,
       converted to PyJWK objects and cached by key ID ("kid").

Cache and lookup rules:
    1. Cached key younger than cache_ttl        → returned, no network call
    2. Cache stale, or kid unknown              → one fetch, if the rate limiter allows it
    3. Rate limiter refuses, stale key present  → stale key returned
    4. Rate limiter refuses, no key for kid     → AuthenticationError

    Concurrent misses wait on one asyncio.Lock, so a burst of requests with a
    new kid causes a single fetch.

Rate Limiter: sliding window
    Each fetch records a timestamp; timestamps older than the window are
    dropped; a fetch is refused while `max_requests` remain in the window.
"""

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional

import httpx
import jwt

from blog_api.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class JwksRateLimiter:
    """
    Sliding window limiter for JWKS fetches.

    Args:
        max_requests: Fetches allowed per window
        window: Window length in seconds (default: 60)
        clock: Monotonic time source, replaceable in tests
    """

    def __init__(
        self,
        max_requests: int,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window = window
        self.clock = clock
        self._timestamps: List[float] = []

    def try_acquire(self) -> bool:
        """Record a fetch and return True, or return False if the window is full."""
        now = self.clock()
        window_start = now - self.window

        self._timestamps = [ts for ts in self._timestamps if ts > window_start]

        if len(self._timestamps) >= self.max_requests:
            return False

        self._timestamps.append(now)
        return True


class JwksClient:
    """
    Cached, rate-limited access to an identity provider's JWKS.

    Args:
        jwks_url: Full URL of the key set document
        cache_ttl: Seconds a fetched key set stays fresh
        requests_per_minute: Fetch cap (sliding 60s window)
        timeout: HTTP timeout in seconds
        http_client: Shared httpx.AsyncClient; one is created (and owned) when omitted
        clock: Monotonic time source, replaceable in tests
    """

    def __init__(
        self,
        jwks_url: str,
        cache_ttl: float = 600,
        requests_per_minute: int = 5,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.jwks_url = jwks_url
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self.clock = clock
        self.rate_limiter = JwksRateLimiter(requests_per_minute, window=60.0, clock=clock)

        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)

        self._keys: Dict[str, jwt.PyJWK] = {}
        self._fetched_at: Optional[float] = None
        self._lock = asyncio.Lock()
        self.fetch_count = 0

    def _is_fresh(self) -> bool:
        if self._fetched_at is None:
            return False
        return self.clock() - self._fetched_at < self.cache_ttl

    def _cached(self, kid: str) -> Optional[jwt.PyJWK]:
        if self._is_fresh():
            return self._keys.get(kid)
        return None

    async def get_signing_key(self, kid: str) -> jwt.PyJWK:
        """
        Return the signing key with the given key ID.

        Raises:
            AuthenticationError: key set unreachable, lookup cap reached,
                or no key matches kid
        """
        key = self._cached(kid)
        if key is not None:
            return key

        async with self._lock:
            # Another request may have refreshed the cache while we waited
            key = self._cached(kid)
            if key is not None:
                return key

            if not self.rate_limiter.try_acquire():
                stale = self._keys.get(kid)
                if stale is not None:
                    logger.warning("JWKS lookup cap reached, serving stale key %s", kid)
                    return stale
                logger.warning(
                    "JWKS lookup cap reached (%d/min), rejecting kid %s",
                    self.rate_limiter.max_requests,
                    kid,
                )
                raise AuthenticationError(
                    "Too many requests to the JWKS endpoint",
                    context={"kid": kid},
                )

            await self._refresh()

        key = self._keys.get(kid)
        if key is None:
            raise AuthenticationError(
                f"Unable to find a signing key that matches '{kid}'",
                context={"kid": kid},
            )
        return key

    async def _refresh(self) -> None:
        """Fetch the key set and replace the cache. Caller holds the lock."""
        start_time = time.perf_counter()
        self.fetch_count += 1

        try:
            response = await self.http_client.get(self.jwks_url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("JWKS fetch from %s failed: %s", self.jwks_url, str(e))
            raise AuthenticationError(
                "Unable to fetch signing keys",
                context={"jwks_url": self.jwks_url, "error_type": type(e).__name__},
            ) from e

        entries = payload.get("keys", []) if isinstance(payload, dict) else []
        keys: Dict[str, jwt.PyJWK] = {}
        for entry in entries:
            kid = entry.get("kid")
            if not kid or entry.get("use", "sig") != "sig":
                continue
            try:
                keys[kid] = jwt.PyJWK(entry)
            except jwt.PyJWTError as e:
                logger.warning("Skipping unusable JWKS entry %s: %s", kid, str(e))

        if not keys:
            raise AuthenticationError(
                "The JWKS endpoint did not contain any signing keys",
                context={"jwks_url": self.jwks_url},
            )

        self._keys = keys
        self._fetched_at = self.clock()

        logger.info(
            "Fetched %d signing keys from %s in %.0fms",
            len(keys),
            self.jwks_url,
            (time.perf_counter() - start_time) * 1000,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

"""Rate limiting for authentication endpoints.

SECURITY: Protects against brute-force attacks on /auth/login and credential
stuffing / spam on /auth/register. Sliding window per client IP.

State lives in Redis when REDIS_URL is configured so every worker shares the
same counters; otherwise each process keeps its own in-memory counters, which
multiplies the effective limit by the number of processes.

Threading note: threading.Lock guards the in-memory state. The critical
section is a few dict operations and never awaits.
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock

import redis
from fastapi import Request

from tourism.config import settings
from tourism.utils.exceptions import raise_too_many_requests

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    max_requests: int = 5  # Maximum requests in window
    window_seconds: int = 60  # Time window in seconds
    block_seconds: int = 300  # Block duration after exceeding limit
    namespace: str = "auth"


@dataclass
class RateLimitState:
    """State for a single key (in-memory fallback)."""

    requests: list[float] = field(default_factory=list)
    blocked_until: float = 0.0


def client_ip(request: Request) -> str:
    """Extract client IP from request, considering proxies.

    X-Forwarded-For is only trusted when TRUST_PROXY is enabled, otherwise a
    client could spoof it to dodge the limiter.
    """
    if settings.trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # First entry is the original client
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimiter:
    """Sliding-window limiter with Redis support and in-memory fallback."""

    def __init__(self, config: RateLimitConfig | None = None) -> None:
        self.config = config or RateLimitConfig()
        self._local_state: dict[str, RateLimitState] = defaultdict(RateLimitState)
        self._lock = Lock()
        self._redis: redis.Redis | None = None

        if settings.redis_url:
            try:
                self._redis = redis.from_url(settings.redis_url, decode_responses=True)
                self._redis.ping()
            except redis.RedisError as exc:
                logger.warning("Redis unavailable for rate limiting, using local memory: %s", exc)
                self._redis = None

    def _keys(self, key: str) -> tuple[str, str]:
        return f"rl:{self.config.namespace}:{key}", f"rl_block:{self.config.namespace}:{key}"

    def is_allowed(self, key: str) -> tuple[bool, int]:
        """Check if request is allowed for the given key. Returns (allowed, retry_after)."""
        if self._redis:
            return self._is_allowed_redis(key)
        return self._is_allowed_local(key)

    def _is_allowed_redis(self, key: str) -> tuple[bool, int]:
        """Redis-based rate limiting using a sorted set for the sliding window."""
        now = time.time()
        rl_key, block_key = self._keys(key)

        try:
            blocked_until = self._redis.get(block_key)
            if blocked_until:
                remaining = int(float(blocked_until) - now)
                if remaining > 0:
                    return False, remaining

            pipe = self._redis.pipeline()
            pipe.zadd(rl_key, {str(now): now})
            pipe.zremrangebyscore(rl_key, 0, now - self.config.window_seconds)
            pipe.zcard(rl_key)
            pipe.expire(rl_key, self.config.window_seconds * 2)
            results = pipe.execute()

            request_count = results[2]

            if request_count > self.config.max_requests:
                block_val = str(now + self.config.block_seconds)
                self._redis.setex(block_key, self.config.block_seconds, block_val)
                return False, self.config.block_seconds

            return True, 0
        except redis.RedisError as exc:
            logger.warning("Redis error during rate limiting, falling back to local: %s", exc)
            return self._is_allowed_local(key)

    def _is_allowed_local(self, key: str) -> tuple[bool, int]:
        """Local memory fallback for rate limiting."""
        now = time.time()
        with self._lock:
            state = self._local_state[key]
            if state.blocked_until > now:
                return False, int(state.blocked_until - now)

            window_start = now - self.config.window_seconds
            state.requests = [ts for ts in state.requests if ts >= window_start]

            if len(state.requests) >= self.config.max_requests:
                state.blocked_until = now + self.config.block_seconds
                return False, self.config.block_seconds

            state.requests.append(now)
            return True, 0

    def check(self, request: Request, error_msg: str, scope: str | None = None) -> str:
        """Raise 429 if the caller is over the limit; return the key used.

        ``scope`` narrows the key to one target (e.g. the login email) so that
        resetting it never clears attempts made against other targets.
        """
        key = client_ip(request)
        if scope:
            key = f"{key}:{scope}"
        allowed, retry_after = self.is_allowed(key)
        if not allowed:
            logger.warning("Rate limit exceeded namespace=%s", self.config.namespace)
            raise_too_many_requests(error_msg, retry_after=retry_after)
        return key

    def reset(self, key: str) -> None:
        """Reset rate limit state for a key."""
        if self._redis:
            try:
                self._redis.delete(*self._keys(key))
            except redis.RedisError as exc:
                logger.warning("Redis error during reset, ignoring: %s", exc)

        with self._lock:
            self._local_state.pop(key, None)

    def clear(self) -> None:
        """Drop all in-memory state."""
        with self._lock:
            self._local_state.clear()

    def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            self._redis.close()


# Global rate limiters for auth endpoints
auth_rate_limiter = RateLimiter(
    RateLimitConfig(
        max_requests=5,  # 5 attempts
        window_seconds=60,  # per minute
        block_seconds=300,  # 5 minute block
        namespace="login",
    )
)

register_rate_limiter = RateLimiter(
    RateLimitConfig(
        max_requests=3,  # 3 registrations
        window_seconds=3600,  # per hour
        block_seconds=3600,  # 1 hour block
        namespace="register",
    )
)

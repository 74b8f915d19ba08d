import logging
import math
import time

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


def client_ip(request) -> str:
    """Returns the caller's IP, preferring the first X-Forwarded-For hop"""
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR') or 'unknown'


class LoginRateLimiter:
    """
    Counts failed administrator logins per client IP in the Django cache.

    The counter is an integer bumped with the cache's atomic ``incr``, so
    parallel failures are all counted. A second key holds the time of the
    latest failure. Both expire one lockout window after the last failure,
    which makes the counters survive across worker processes when a shared
    cache backend is configured.
    """

    key_prefix = 'login-attempts'

    def __init__(self, max_attempts=None, lockout_seconds=None):
        self.max_attempts = max_attempts or getattr(settings, 'LOGIN_MAX_ATTEMPTS', 5)
        self.lockout_seconds = lockout_seconds or getattr(settings, 'LOGIN_LOCKOUT_SECONDS', 900)

    def _key(self, ip: str) -> str:
        return f'{self.key_prefix}:{ip}'

    def _last_key(self, ip: str) -> str:
        return f'{self.key_prefix}:{ip}:last'

    def failures(self, ip: str) -> int:
        return cache.get(self._key(ip), 0)

    def retry_after(self, ip: str) -> int:
        """Seconds the caller still has to wait, 0 when not locked out"""
        if self.failures(ip) < self.max_attempts:
            return 0
        last_attempt = cache.get(self._last_key(ip))
        if last_attempt is None:
            return 0
        remaining = self.lockout_seconds - (time.time() - last_attempt)
        return max(0, math.ceil(remaining))

    def record_failure(self, ip: str) -> int:
        """Counts one failed login and returns the running total"""
        key = self._key(ip)
        cache.add(key, 0, timeout=self.lockout_seconds)
        try:
            count = cache.incr(key)
        except ValueError:
            # the entry expired between add() and incr()
            cache.add(key, 1, timeout=self.lockout_seconds)
            count = 1
        cache.touch(key, timeout=self.lockout_seconds)
        cache.set(self._last_key(ip), time.time(), timeout=self.lockout_seconds)
        if count >= self.max_attempts:
            logger.warning('Login locked for %s after %s failed attempts.', ip, count)
        return count

    def reset(self, ip: str) -> None:
        cache.delete_many([self._key(ip), self._last_key(ip)])

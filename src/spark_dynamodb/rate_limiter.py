"""Per-task write throttling."""

import time


class RateLimiter:
    """
    RateLimiter keeps a task at or below a rate of capacity units per second.

    Units are paid for after the fact: ``acquire(units)`` returns at once when
    the limiter is idle and charges ``units`` to the next caller, which then
    sleeps until the previous charge has drained at ``rate_limit`` per second.
    This matches how DynamoDB reports consumed capacity, i.e. after the
    request that consumed it.

    Example:
        rate_limiter = RateLimiter(write_rate)

        After every request, acquire the units it consumed
            rate_limiter.acquire(consumed_units)

    Instances are not thread-safe; each task owns one.
    """

    def __init__(self, rate_limit, time_module=None):
        """
        Initializes a RateLimiter object

        :param rate_limit: The desired rate in units per second
        :param time_module: Optional: the module providing monotonic() and sleep(). Intended for tests.
        """
        if rate_limit <= 0:
            raise ValueError("rate_limit must be greater than zero")
        self._rate_limit = float(rate_limit)
        self._time_module = time_module or time
        self._next_free = None

    @property
    def rate_limit(self):
        """A limit of units per second."""
        return self._rate_limit

    def acquire(self, units=1):
        """
        Blocks until the rate permits another request, then charges ``units``.

        :param units: Number of units consumed by the request just made
        :return: Seconds spent sleeping
        """
        if units < 0:
            raise ValueError("units must not be negative")

        now = self._time_module.monotonic()
        if self._next_free is None or self._next_free < now:
            self._next_free = now

        wait = self._next_free - now
        if wait > 0:
            self._time_module.sleep(wait)

        self._next_free += units / self._rate_limit
        return wait

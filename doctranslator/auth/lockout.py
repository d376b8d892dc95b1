import asyncio
import math
from collections.abc import Awaitable, Callable

from doctranslator.logging.logger import Log

Sleep = Callable[[float], Awaitable[None]]


class SignInLockout:
    """Counts failed sign-ins and enforces the cool-down after too many.

    Once ``max_attempts`` consecutive failures are recorded the lock is set
    for ``lockout_seconds``. A background task ticks once per second and
    clears the lock, together with the failure count, when it reaches zero.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 4,
        lockout_seconds: int = 300,
        on_unlock: Callable[[], None] | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._max_attempts = max_attempts
        self._lockout_seconds = lockout_seconds
        self._on_unlock = on_unlock
        self._sleep = sleep
        self._failure_count = 0
        self._remaining_seconds = 0
        self._ticker: asyncio.Task[None] | None = None

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def is_locked(self) -> bool:
        return self._remaining_seconds > 0

    @property
    def remaining_minutes(self) -> int:
        return math.ceil(self._remaining_seconds / 60)

    def record_failure(self) -> bool:
        """Count one failed attempt. Returns True if this failure set the lock.

        Must be called from a running event loop when it may lock, since the
        countdown runs as a task on that loop.
        """
        self._failure_count += 1
        if self._failure_count < self._max_attempts or self.is_locked:
            return False
        self._remaining_seconds = self._lockout_seconds
        Log.warning(
            f"Sign-in locked for {self._lockout_seconds}s after "
            f"{self._failure_count} failed attempts"
        )
        self._ticker = asyncio.get_running_loop().create_task(self._countdown())
        return True

    def record_success(self) -> None:
        self._failure_count = 0

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if not self.is_locked:
            return
        self._remaining_seconds -= 1
        if self._remaining_seconds == 0:
            self._failure_count = 0
            Log.info("Sign-in lock expired")
            if self._on_unlock is not None:
                self._on_unlock()

    async def wait(self) -> None:
        """Wait until the running countdown, if any, has finished."""
        if self._ticker is not None:
            await asyncio.shield(self._ticker)

    def cancel(self) -> None:
        """Stop the countdown task. The lock state itself is left as is."""
        if self._ticker is not None and not self._ticker.done():
            self._ticker.cancel()
        self._ticker = None

    async def _countdown(self) -> None:
        while self.is_locked:
            await self._sleep(1)
            self.tick()

"""Cooperative cancellation tokens.

A :class:`CancellationToken` is handed to a call through
:class:`~inheritage.core.types.RequestOptions`.  Triggering it aborts the
in-flight HTTP exchange and makes the call raise
:class:`~inheritage.core.errors.RequestCancelled`.  Triggering it after
the call resolved has no effect.
"""
from __future__ import annotations

import asyncio


class CancellationToken:
    """A one-shot signal, safe to share between concurrent calls.

    The token never times out on its own; use :meth:`after` to derive a
    time-bounded token.
    """

    __slots__ = ("_event", "_reason", "_timer")

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._timer: asyncio.TimerHandle | None = None

    @classmethod
    def after(cls, seconds: float) -> CancellationToken:
        """Return a token that cancels itself after *seconds*.

        Must be called from a running event loop.
        """
        token = cls()
        loop = asyncio.get_running_loop()
        token._timer = loop.call_later(
            max(0.0, float(seconds)),
            token.cancel,
            f"Timed out after {seconds}s",
        )
        return token

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Trigger the token.  Subsequent calls are no-ops."""
        if self._event.is_set():
            return
        self._reason = reason
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is triggered."""
        await self._event.wait()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"CancellationToken({state})"

"""
Query Coordinator

Runs ad hoc queries against the player. The slave-mode protocol has no
request identifiers, so an answer can only be told apart from unrelated
chatter by its pattern and by never having two queries in flight at once.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from mplayer_control.application.queries.answers import INCOMPLETE, Incomplete, is_property_unknown
from mplayer_control.config.settings import QuerySettings
from mplayer_control.domain.playback.signals import PropertyError, RawLine, Signal
from mplayer_control.domain.shared.exceptions import PropertyUnknownError, QueryTimeoutError
from mplayer_control.domain.shared.messages import LogTemplates
from mplayer_control.infrastructure.protocol.commands import CommandChannel

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PendingQuery(Generic[T]):
    """The single in-flight query: what was asked and what came back so far."""

    commands: tuple[str, ...]
    extract: Callable[[str], T | Incomplete]
    deadline: float
    subject: str = "unknown"
    lines: list[str] = field(default_factory=list)
    property_error: str | None = None
    failure: BaseException | None = None

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class QueryCoordinator:
    """Single-flight query execution with a bounded poll loop.

    While a query is pending, ``offer`` routes raw output lines and property
    errors into it; a second ``query`` call waits until the first resolves.
    """

    def __init__(
        self,
        channel: Callable[[], CommandChannel],
        settings: QuerySettings | None = None,
    ) -> None:
        self._channel = channel
        self._settings = settings or QuerySettings()
        self._lock = asyncio.Lock()
        self._pending: PendingQuery[Any] | None = None

    @property
    def pending(self) -> PendingQuery[Any] | None:
        return self._pending

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def offer(self, signal: Signal) -> bool:
        """Hand an output signal to the pending query.

        Returns:
            True if a query was pending and took the signal.
        """
        pending = self._pending
        if pending is None:
            return False
        match signal:
            case RawLine(text=text):
                pending.lines.append(text)
                return True
            case PropertyError(name=name):
                pending.property_error = name
                return True
            case _:
                return False

    def fail_pending(self, error: BaseException) -> None:
        """Reject the pending query at its next poll."""
        if self._pending is not None and self._pending.failure is None:
            logger.debug(LogTemplates.QUERY_ABORTED, error)
            self._pending.failure = error

    async def query(
        self,
        commands: Sequence[str],
        extract: Callable[[str], T | Incomplete],
        *,
        subject: str = "unknown",
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> T:
        """Send ``commands`` and poll the collected answer text with ``extract``.

        Args:
            commands: Command lines to send, in order.
            extract: Maps the accumulated answer text to a result, or to
                ``INCOMPLETE`` while answers are still missing.
            subject: Property name reported if the player does not know it.
            poll_interval: Seconds between extraction attempts.
            timeout: Seconds before the query is abandoned.

        Raises:
            PropertyUnknownError: The player reported an unknown property.
            QueryTimeoutError: No complete answer before the deadline.
            PlayerExitedError: The player exited while the query was pending.
        """
        poll_interval = poll_interval or self._settings.poll_interval
        timeout = timeout or self._settings.timeout

        if self._lock.locked():
            logger.debug(LogTemplates.QUERY_WAITING)

        async with self._lock:
            loop = asyncio.get_running_loop()
            started = loop.time()
            pending: PendingQuery[T] = PendingQuery(
                commands=tuple(commands),
                extract=extract,
                deadline=started + timeout,
                subject=subject,
            )
            self._pending = pending
            try:
                logger.debug(LogTemplates.QUERY_ISSUED, " | ".join(pending.commands))
                self._channel().send_all(pending.commands)

                while True:
                    remaining = pending.deadline - loop.time()
                    await asyncio.sleep(max(0.0, min(poll_interval, remaining)))

                    result = self._poll(pending)
                    if result is not INCOMPLETE:
                        logger.debug(LogTemplates.QUERY_RESOLVED, loop.time() - started)
                        return result

                    if loop.time() >= pending.deadline:
                        logger.warning(LogTemplates.QUERY_TIMED_OUT, timeout, pending.text)
                        raise QueryTimeoutError(timeout)
            finally:
                self._pending = None

    def _poll(self, pending: PendingQuery[T]) -> T | Incomplete:
        if pending.failure is not None:
            raise pending.failure

        text = pending.text
        if pending.property_error is not None or is_property_unknown(text):
            name = pending.property_error or pending.subject
            logger.info(LogTemplates.QUERY_PROPERTY_UNKNOWN, name)
            raise PropertyUnknownError(name)

        return pending.extract(text)

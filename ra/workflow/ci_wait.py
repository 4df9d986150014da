"""Bounded wait for CI to settle on a commit.

The waiter polls a ``ContinuousIntegrationStatus`` source until the overall
state leaves PENDING or the deadline passes:

    PENDING --(poll: success)--> SUCCESS   Ok(status)
    PENDING --(poll: failure)--> FAILURE   Err(kind="failure")
    PENDING --(deadline)-------> TIMEOUT   Err(kind="timeout")
    any     --(source error)---> ERROR     Err(kind="query")

Clock and sleep are injectable so tests never wait in real time.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from ra.core.result import Err, Ok, Result
from ra.git.ci import CIState, CIStatus, ContinuousIntegrationStatus

__all__ = ["CIWaitError", "CIWaiter"]


@dataclass(frozen=True, slots=True)
class CIWaitError:
    """Why waiting for CI did not end in success.

    Attributes:
        kind: "timeout", "failure" or "query"
        message: Error message
        status: Last snapshot seen, if any
        hint: Optional remediation
    """

    kind: Literal["timeout", "failure", "query"]
    message: str
    status: CIStatus | None = None
    hint: str | None = None


class CIWaiter:
    def __init__(
        self,
        source: ContinuousIntegrationStatus,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        on_poll: Callable[[CIStatus], None] | None = None,
    ) -> None:
        self._source = source
        self._clock = clock
        self._sleep = sleep
        self._on_poll = on_poll

    def wait_for_completion(
        self,
        reference: str,
        poll_interval: float,
        timeout: float,
    ) -> Result[CIStatus, CIWaitError]:
        """Poll until CI succeeds, fails, or ``timeout`` seconds elapse.

        Polls once immediately, then sleeps ``poll_interval`` between polls.
        Never polls again after a terminal state.
        """
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        deadline = self._clock() + timeout
        last: CIStatus | None = None
        while True:
            polled = self._source.get(reference)
            if isinstance(polled, Err):
                return Err(
                    CIWaitError(
                        kind="query",
                        message=polled.error.message,
                        status=last,
                        hint=polled.error.hint,
                    )
                )

            last = polled.value
            if self._on_poll is not None:
                self._on_poll(last)

            match last.state:
                case CIState.SUCCESS:
                    return Ok(last)
                case CIState.FAILURE:
                    names = ", ".join(c.name for c in last.failing())
                    return Err(
                        CIWaitError(
                            kind="failure",
                            message=f"CI checks failed: {names}" if names else "CI checks failed",
                            status=last,
                        )
                    )
                case CIState.PENDING:
                    pass

            if self._clock() + poll_interval > deadline:
                return Err(
                    CIWaitError(
                        kind="timeout",
                        message=f"timed out waiting for CI after {_format_seconds(timeout)}",
                        status=last,
                    )
                )
            self._sleep(poll_interval)


def _format_seconds(seconds: float) -> str:
    if seconds >= 60 and seconds % 60 == 0:
        minutes = int(seconds // 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    return f"{seconds:g}s"

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class Debouncer:
    """Trailing-edge debounce driven by explicit polling.

    ``schedule`` (re)arms a single deadline ``delay`` seconds from now; repeated calls
    push the deadline back instead of queueing more runs. ``poll`` runs the action once
    the deadline has passed.
    """

    def __init__(self, delay: float, action: Callable[[], object], clock: Callable[[], float] = time.monotonic) -> None:
        self._delay = delay
        self._action = action
        self._clock = clock
        self._deadline: float | None = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def schedule(self) -> None:
        self._deadline = self._clock() + self._delay

    def cancel(self) -> None:
        self._deadline = None

    def poll(self) -> bool:
        if self._deadline is None or self._clock() < self._deadline:
            return False
        self._deadline = None
        self._action()
        return True

    def flush(self) -> bool:
        if self._deadline is None:
            return False
        self._deadline = None
        self._action()
        return True

import logging
from collections.abc import Callable
from typing import Any

import httpx
from tenacity import RetryCallState, retry, retry_if_exception, stop_after_attempt, wait_exponential_jitter

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def is_retryable_http_error(exc: BaseException) -> bool:
    """Transport failures, rate limiting and server errors are worth another attempt; other 4xx are not."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS
    return isinstance(exc, httpx.TransportError)


def default_http_retry(label: str, *, attempts: int = 3) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Build the tenacity decorator used around player-source HTTP calls.

    Before each new attempt a warning naming *label* is logged. Works on plain
    and ``async`` callables alike.
    """

    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning("Retrying %s (attempt %d): %s", label, retry_state.attempt_number, retry_state.outcome)

    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential_jitter(initial=1, max=10),
        retry=retry_if_exception(is_retryable_http_error),
        before_sleep=_log_retry,
        reraise=True,
    )

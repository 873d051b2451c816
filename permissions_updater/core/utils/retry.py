"""
Retry utilities with a fixed delay.

The credential host is the only remote API that is retried; a failed call is
attempted again after a short constant pause, a bounded number of times.
"""

from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from permissions_updater.core.errors import RemoteOperationError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.info(
        "retrying_remote_call",
        call=getattr(retry_state.fn, "__name__", "call"),
        attempt=retry_state.attempt_number,
        error=str(exception) if exception else None,
    )


def call_with_fixed_retry(
    func: Callable[..., T],
    *args: Any,
    max_attempts: int = 3,
    delay_seconds: float = 0.2,
    **kwargs: Any,
) -> T:
    """
    Call `func`, retrying on `RemoteOperationError` with a constant pause.

    Args:
        func: Callable to invoke
        *args: Positional arguments for the callable
        max_attempts: Total number of attempts, including the first one
        delay_seconds: Pause between attempts
        **kwargs: Keyword arguments for the callable

    Returns:
        Result of the first successful call

    Raises:
        RemoteOperationError: The error of the last attempt, if all attempts fail
    """
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(delay_seconds),
        retry=retry_if_exception_type(RemoteOperationError),
        before_sleep=_log_retry,
        reraise=True,
    )
    return retrying(func, *args, **kwargs)

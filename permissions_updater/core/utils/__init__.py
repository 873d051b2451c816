"""
Shared utilities for logging and retry handling.
"""

from permissions_updater.core.utils.logging import configure_logging, log_operation
from permissions_updater.core.utils.retry import call_with_fixed_retry

__all__ = [
    "configure_logging",
    "log_operation",
    "call_with_fixed_retry",
]

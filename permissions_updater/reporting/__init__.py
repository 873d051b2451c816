from permissions_updater.reporting.checks import ChecksReporter, unknown_user_error

__all__ = [
    "ChecksReporter",
    "unknown_user_error",
]

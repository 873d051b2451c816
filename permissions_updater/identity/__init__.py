from permissions_updater.identity.directory import IdentityDirectory, load_user_report

__all__ = [
    "IdentityDirectory",
    "load_user_report",
]

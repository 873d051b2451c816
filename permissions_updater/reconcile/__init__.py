from permissions_updater.reconcile.driver import ReconcileReport, ReconciliationDriver

__all__ = [
    "ReconcileReport",
    "ReconciliationDriver",
]

from permissions_updater.payloads.builder import DesiredState, DesiredStateBuilder, includes_pattern
from permissions_updater.payloads.models import GroupPayload, IssueTrackerRecord, PermissionTargetPayload, Principals
from permissions_updater.payloads.writer import PayloadWriter

__all__ = [
    "DesiredState",
    "DesiredStateBuilder",
    "GroupPayload",
    "IssueTrackerRecord",
    "PayloadWriter",
    "PermissionTargetPayload",
    "Principals",
    "includes_pattern",
]

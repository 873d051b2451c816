"""
Submit-then-prune reconciliation.

For each object kind the driver first creates or replaces every object that
has a payload file, then deletes every managed remote object that no longer
has one. Groups come first so that permission targets never reference a group
that does not exist yet.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from permissions_updater.core.errors import RemoteOperationError
from permissions_updater.core.models import ObjectKind
from permissions_updater.integrations.artifactory.base import AuthorizationClient

logger = structlog.get_logger(__name__)


@dataclass
class ReconcileReport:
    """Outcome of one reconciliation run. Failures are recorded, never raised."""

    submitted: dict[ObjectKind, list[str]] = field(default_factory=dict)
    deleted: dict[ObjectKind, list[str]] = field(default_factory=dict)
    failures: list[RemoteOperationError] = field(default_factory=list)
    skipped_kinds: list[ObjectKind] = field(default_factory=list)
    unpruned_kinds: list[ObjectKind] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures and not self.unpruned_kinds


class ReconciliationDriver:
    """Converges the managed objects on the permission API to the payload files of one run."""

    def __init__(self, client: AuthorizationClient, output_dir: Path):
        self.client = client
        self.output_dir = output_dir

    def _payload_files(self, kind: ObjectKind) -> list[Path] | None:
        payload_dir = self.output_dir / kind.payload_dir
        if not payload_dir.is_dir():
            return None
        return sorted(payload_dir.glob("*.json"))

    def _submit(self, kind: ObjectKind, files: list[Path], report: ReconcileReport) -> None:
        logger.info("submitting_objects", kind=str(kind), count=len(files))
        submitted = report.submitted.setdefault(kind, [])
        for payload_file in files:
            name = payload_file.stem
            payload: dict[str, Any] = json.loads(payload_file.read_text(encoding="utf-8"))
            try:
                self.client.create_or_replace(kind, name, payload)
            except RemoteOperationError as e:
                logger.error("object_submit_failed", **e.as_log_context())
                report.failures.append(e)
                continue
            submitted.append(name)

    def _prune(self, kind: ObjectKind, files: list[Path], report: ReconcileReport) -> None:
        try:
            remote_names = self.client.list_generated(kind)
        except RemoteOperationError as e:
            logger.error("object_list_failed", **e.as_log_context())
            report.failures.append(e)
            report.unpruned_kinds.append(kind)
            return

        local_names = {payload_file.stem for payload_file in files}
        deleted = report.deleted.setdefault(kind, [])
        for name in remote_names:
            if name in local_names:
                continue
            logger.info("deleting_object", kind=str(kind), name=name)
            try:
                self.client.delete(kind, name)
            except RemoteOperationError as e:
                logger.error("object_delete_failed", **e.as_log_context())
                report.failures.append(e)
                continue
            deleted.append(name)

    def reconcile(self) -> ReconcileReport:
        report = ReconcileReport()
        for kind in ObjectKind:
            files = self._payload_files(kind)
            if files is None:
                logger.info("payload_directory_missing", kind=str(kind), output_dir=str(self.output_dir))
                report.skipped_kinds.append(kind)
                continue

            self._submit(kind, files, report)
            self._prune(kind, files, report)

        logger.info(
            "reconciliation_finished",
            submitted=sum(len(names) for names in report.submitted.values()),
            deleted=sum(len(names) for names in report.deleted.values()),
            failures=len(report.failures),
        )
        return report

"""
Provisioning of CD credentials.

Each repository listed in the CD index gets a short lived Artifactory token
scoped to its CD group. The token and the name of its (virtual) user are
stored as encrypted Actions secrets in the repository, where the release
workflow picks them up.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import structlog

from permissions_updater.core.errors import RemoteOperationError
from permissions_updater.integrations.artifactory.base import AuthorizationClient
from permissions_updater.integrations.github.models import RepositoryPublicKey
from permissions_updater.naming import NameCodec
from permissions_updater.provisioning.crypto import encrypt_secret

logger = structlog.get_logger(__name__)

USERNAME_SECRET_SUFFIX = "USERNAME"
TOKEN_SECRET_SUFFIX = "TOKEN"


class SecretsClient(Protocol):
    def get_public_key(self, repository: str) -> RepositoryPublicKey: ...

    def create_or_update_secret(self, repository: str, name: str, encrypted_value: str, key_id: str) -> None: ...


@dataclass
class ProvisioningReport:
    provisioned: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, RemoteOperationError] = field(default_factory=dict)


def read_cd_index(path: Path) -> list[str]:
    """Read the repositories of a `cd.index.json` file; a missing file lists none."""
    if not path.is_file():
        logger.info("cd_index_missing", path=str(path))
        return []
    return json.loads(path.read_text(encoding="utf-8"))


class CredentialProvisioner:
    """Issues CD tokens and stores them as encrypted secrets in their repositories."""

    def __init__(
        self,
        authorization_client: AuthorizationClient,
        secrets_client: SecretsClient,
        names: NameCodec,
        *,
        secret_name_prefix: str,
        token_seconds_valid: int,
        dry_run: bool = False,
    ):
        self.authorization_client = authorization_client
        self.secrets_client = secrets_client
        self.names = names
        self.secret_name_prefix = secret_name_prefix
        self.token_seconds_valid = token_seconds_valid
        self.dry_run = dry_run

    def _provision(self, repository: str, report: ProvisioningReport) -> None:
        username = self.names.token_username(repository)
        group = self.names.group_name(repository)

        if self.dry_run:
            logger.info(
                "dry_run_skip_token",
                repository=repository,
                username=username,
                group=group,
                valid_for_seconds=self.token_seconds_valid,
            )
            report.skipped.append(repository)
            return

        try:
            token = self.authorization_client.issue_token(username, group, self.token_seconds_valid)
        except RemoteOperationError as e:
            logger.warning("token_generation_failed", repository=repository, **e.as_log_context())
            report.failed[repository] = e
            return

        if token is None:
            report.skipped.append(repository)
            return

        try:
            public_key = self.secrets_client.get_public_key(repository)
        except RemoteOperationError as e:
            logger.warning("public_key_unavailable", repository=repository, **e.as_log_context())
            report.failed[repository] = e
            return
        logger.info("public_key_retrieved", repository=repository, key_id=public_key.key_id)

        secrets = {
            self.secret_name_prefix + USERNAME_SECRET_SUFFIX: encrypt_secret(username, public_key.key),
            self.secret_name_prefix + TOKEN_SECRET_SUFFIX: encrypt_secret(token, public_key.key),
        }
        # Every secret is attempted, even after an earlier one failed
        for name, encrypted_value in secrets.items():
            try:
                self.secrets_client.create_or_update_secret(repository, name, encrypted_value, public_key.key_id)
            except RemoteOperationError as e:
                logger.warning("secret_update_failed", repository=repository, secret=name, **e.as_log_context())
                report.failed.setdefault(repository, e)

        if repository not in report.failed:
            report.provisioned.append(repository)

    def provision(self, repositories: list[str]) -> ProvisioningReport:
        report = ProvisioningReport()
        for repository in repositories:
            logger.info("provisioning_repository", repository=repository)
            self._provision(repository, report)

        logger.info(
            "provisioning_finished",
            provisioned=len(report.provisioned),
            skipped=len(report.skipped),
            failed=len(report.failed),
        )
        return report

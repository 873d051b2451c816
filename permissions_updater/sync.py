"""
Run entry points.

All clients are constructed here, from an explicit `Config`, and injected into
the components that use them.
"""

from contextlib import ExitStack
from dataclasses import dataclass

import httpx
import structlog

from permissions_updater.core.config import Config
from permissions_updater.core.utils.logging import log_operation
from permissions_updater.definitions import DefinitionLoader
from permissions_updater.identity import IdentityDirectory
from permissions_updater.integrations.artifactory import ArtifactoryClient
from permissions_updater.integrations.github import GitHubSecretsClient
from permissions_updater.integrations.jira import JiraClient
from permissions_updater.naming import NameCodec
from permissions_updater.payloads import DesiredState, DesiredStateBuilder, PayloadWriter
from permissions_updater.payloads.writer import CD_INDEX_FILE
from permissions_updater.provisioning import CredentialProvisioner, ProvisioningReport, read_cd_index
from permissions_updater.reconcile import ReconcileReport, ReconciliationDriver
from permissions_updater.reporting import ChecksReporter

logger = structlog.get_logger(__name__)


@dataclass
class SyncResult:
    state: DesiredState
    reconcile: ReconcileReport
    provisioning: ProvisioningReport


def generate(config: Config, jira_client: JiraClient, http_client: httpx.Client) -> DesiredState:
    """Compute the desired state from the definitions and write it to the output directory."""
    names = NameCodec(config.artifactory.object_prefix)
    writer = PayloadWriter(config.sync.output_dir)
    writer.check_output_dir()

    with log_operation("load_definitions", definitions_dir=str(config.sync.definitions_dir)):
        definitions = DefinitionLoader(config.sync.definitions_dir, config.sync.teams_dir).load_definitions()

    with log_operation("load_known_users"):
        identity = IdentityDirectory.from_reports(config.known_users, http_client, jira_lookup=jira_client)

    builder = DesiredStateBuilder(
        names,
        identity,
        ChecksReporter(config.sync.checks_report_dir),
        development=config.sync.development,
        cd_allowed_repository_pattern=config.sync.cd_allowed_repository_pattern,
        component_lookup=jira_client,
        jira_url=config.jira.url,
    )
    with log_operation("build_desired_state"):
        state = builder.build(definitions)

    with log_operation("write_payloads", output_dir=str(config.sync.output_dir)):
        writer.write(state)
    return state


def run_generate(config: Config) -> DesiredState:
    with ExitStack() as stack:
        http_client = stack.enter_context(httpx.Client())
        jira_client = JiraClient(config.jira)
        stack.callback(jira_client.close)
        return generate(config, jira_client, http_client)


def run_sync(config: Config) -> SyncResult:
    """
    Generate payloads, converge Artifactory to them, then provision CD credentials.

    Any `ConfigurationError` is raised before the first remote change. Remote
    failures are logged and returned in the reports.
    """
    names = NameCodec(config.artifactory.object_prefix)
    logger.info("sync_started", dry_run=config.sync.dry_run, development=config.sync.development, prefix=names.prefix)

    with ExitStack() as stack:
        http_client = stack.enter_context(httpx.Client())
        jira_client = JiraClient(config.jira)
        stack.callback(jira_client.close)
        artifactory = ArtifactoryClient(config.artifactory, names, dry_run=config.sync.dry_run)
        stack.callback(artifactory.close)
        secrets = GitHubSecretsClient(
            config.github,
            max_attempts=config.sync.secret_retry_attempts,
            delay_seconds=config.sync.secret_retry_delay_ms / 1000,
        )
        stack.callback(secrets.close)

        state = generate(config, jira_client, http_client)

        with log_operation("reconcile", dry_run=config.sync.dry_run):
            reconcile_report = ReconciliationDriver(artifactory, config.sync.output_dir).reconcile()

        provisioner = CredentialProvisioner(
            artifactory,
            secrets,
            names,
            secret_name_prefix=config.github.secret_name_prefix,
            token_seconds_valid=config.sync.token_seconds_valid,
            dry_run=config.sync.dry_run,
        )
        with log_operation("provision_credentials"):
            provisioning_report = provisioner.provision(read_cd_index(config.sync.output_dir / CD_INDEX_FILE))

    return SyncResult(state=state, reconcile=reconcile_report, provisioning=provisioning_report)

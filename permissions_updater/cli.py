"""Command line entry point: `rpu generate` and `rpu sync`."""

from pathlib import Path

import click
import structlog

from permissions_updater import __version__
from permissions_updater.core.config import Config
from permissions_updater.core.errors import ConfigurationError
from permissions_updater.core.utils.logging import configure_logging

logger = structlog.get_logger(__name__)

_path_option = click.Path(file_okay=False, path_type=Path)


def _build_config(
    *,
    dry_run: bool,
    development: bool,
    definitions_dir: Path | None,
    teams_dir: Path | None,
    output_dir: Path | None,
    require_remote: bool,
) -> Config:
    # Flags only switch modes on; leaving them out defers to the environment
    config = Config(
        dry_run=True if dry_run else None,
        development=True if development else None,
        definitions_dir=definitions_dir,
        teams_dir=teams_dir,
        output_dir=output_dir,
    )
    configure_logging(config.logging)
    config.validate(require_remote=require_remote)
    return config


def _common_options(func):
    func = click.option("--output-dir", type=_path_option, help="Directory to write payloads to; must not exist.")(func)
    func = click.option("--teams-dir", type=_path_option, help="Directory containing team definitions.")(func)
    func = click.option("--definitions-dir", type=_path_option, help="Directory containing component definitions.")(
        func
    )
    func = click.option("--development", is_flag=True, help="Use development prefixes and skip release uploads.")(func)
    return func


@click.group()
@click.version_option(version=__version__)
def main():
    """Repository permissions updater.

    Turns the YAML upload permission definitions into Artifactory permission
    targets and groups, and provisions CD credentials to GitHub repositories.
    """


@main.command()
@_common_options
def generate(development: bool, definitions_dir: Path | None, teams_dir: Path | None, output_dir: Path | None):
    """Generate payload and index files without contacting Artifactory."""
    from permissions_updater.sync import run_generate

    try:
        config = _build_config(
            dry_run=False,
            development=development,
            definitions_dir=definitions_dir,
            teams_dir=teams_dir,
            output_dir=output_dir,
            require_remote=False,
        )
        state = run_generate(config)
    except ConfigurationError as e:
        logger.error("run_aborted", error=str(e))
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Generated {len(state.permission_targets)} permission targets and {len(state.groups)} groups "
        f"in {config.sync.output_dir}"
    )


@main.command()
@click.option("--dry-run", is_flag=True, help="Only log the changes that would be made remotely.")
@_common_options
def sync(
    dry_run: bool,
    development: bool,
    definitions_dir: Path | None,
    teams_dir: Path | None,
    output_dir: Path | None,
):
    """Generate payloads, apply them to Artifactory, and provision CD secrets."""
    from permissions_updater.sync import run_sync

    try:
        config = _build_config(
            dry_run=dry_run,
            development=development,
            definitions_dir=definitions_dir,
            teams_dir=teams_dir,
            output_dir=output_dir,
            require_remote=True,
        )
        result = run_sync(config)
    except ConfigurationError as e:
        logger.error("run_aborted", error=str(e))
        raise click.ClickException(str(e)) from e

    submitted = sum(len(names) for names in result.reconcile.submitted.values())
    deleted = sum(len(names) for names in result.reconcile.deleted.values())
    click.echo(
        f"Submitted {submitted} objects, deleted {deleted}, {len(result.reconcile.failures)} failed; "
        f"provisioned {len(result.provisioning.provisioned)} repositories, "
        f"{len(result.provisioning.failed)} failed"
    )

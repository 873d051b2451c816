"""
Sync run configuration.

Controls where definitions are read from, where payloads are written to,
and the switches that separate production runs from development runs.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class SyncConfig:
    """Sync run configuration."""

    definitions_dir: Path = Path("permissions")
    teams_dir: Path = Path("teams")
    output_dir: Path = Path("json")
    checks_report_dir: Path = Path(".")
    dry_run: bool = False
    # Development runs use separate prefixes and never grant release uploads
    development: bool = False
    token_minutes_valid: int = 240
    cd_allowed_repository_pattern: str = r"(jenkinsci|jenkins-infra)/.+"
    secret_retry_attempts: int = 3
    secret_retry_delay_ms: int = 200

    @property
    def token_seconds_valid(self) -> int:
        return self.token_minutes_valid * 60

"""Runtime configuration for harness runs."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from .models.identity import Precedence
from .models.results import EngineExitCode


class EngineSettings(BaseSettings):
    """Where the configuration engine lives on the master and the agent."""

    binpath: str = Field(
        default="/opt/puppetlabs/bin/puppet ",
        description="Engine executable prefix; subcommands are appended verbatim.",
    )
    manifest_path: str = Field(
        default="/etc/puppetlabs/code/environments/production/manifests/site.pp",
        description="Site manifest written on the master before each agent run.",
    )
    agent_namespace: Optional[str] = Field(
        default=None,
        description="Network namespace used to reach the master from the agent.",
    )


class RunPolicies(BaseSettings):
    """Exit-code and precedence policies applied to every scenario."""

    title_precedence: Precedence = Field(
        default=Precedence.TITLE,
        description="Which source wins when title and properties disagree on a field.",
    )
    apply_exit_codes: List[int] = Field(
        default_factory=lambda: [EngineExitCode.CHANGES],
        description="Agent exit codes accepted after applying a manifest.",
    )
    setup_exit_codes: List[int] = Field(
        default_factory=lambda: [
            EngineExitCode.NO_CHANGES,
            EngineExitCode.CHANGES,
            EngineExitCode.CHANGES_AND_FAILURES,
        ],
        description="Agent exit codes accepted during setup and cleanup runs.",
    )


class Settings(BaseSettings):
    """Top-level settings object loaded via environment variables or .env files."""

    log_level: str = Field(default="INFO", description="Default log level for structlog.")
    log_renderer: str = Field(default="json", description="Either 'json' or 'console'.")
    engine: EngineSettings = Field(default_factory=EngineSettings)
    policies: RunPolicies = Field(default_factory=RunPolicies)

    model_config = {
        "env_prefix": "NETWORK_RESOURCE_HARNESS_",
        "env_nested_delimiter": "__",
    }


def load_settings() -> Settings:
    """Load configuration using pydantic-settings."""

    return Settings()  # type: ignore[arg-type]

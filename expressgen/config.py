"""Generator configuration.

Typed settings for the orchestrator.  Values can come from defaults,
``EXPRESSGEN_*`` environment variables, or command-line flags, with the
command line taking precedence.  The scaffolding core does not read this
object; it only receives the values it needs.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from expressgen.scaffolder.template_set import RoutePreset


_TRUTHY = {"1", "true", "yes", "on"}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config(BaseModel):
    """Global generator configuration.

    Instances are created once by the CLI entry point and passed to
    :class:`~expressgen.orchestrator.ProjectOrchestrator`.
    """

    output_dir: Path = Field(
        default_factory=Path.cwd,
        description="Parent directory in which the project folder is created",
    )
    package_manager: str = Field(default="npm", min_length=1)
    install_timeout: int = Field(
        default=600, ge=10, description="Per-command package manager timeout in seconds"
    )
    route_preset: RoutePreset = Field(default=RoutePreset.ROOT)
    skip_install: bool = Field(
        default=False, description="Skip installing dependencies (manifest is still created)"
    )
    max_attempts: int = Field(
        default=3, ge=1, description="How many times the interactive flow restarts after an error"
    )
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    def project_path(self, project_name: str) -> Path:
        """Absolute path of the project directory for *project_name*."""
        return (self.output_dir / project_name).expanduser().resolve()

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            EXPRESSGEN_OUTPUT_DIR, EXPRESSGEN_PACKAGE_MANAGER,
            EXPRESSGEN_INSTALL_TIMEOUT, EXPRESSGEN_ROUTE_PRESET,
            EXPRESSGEN_SKIP_INSTALL, EXPRESSGEN_MAX_ATTEMPTS,
            EXPRESSGEN_LOG_LEVEL.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("EXPRESSGEN_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["EXPRESSGEN_OUTPUT_DIR"])
        if os.environ.get("EXPRESSGEN_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["EXPRESSGEN_PACKAGE_MANAGER"]
        if os.environ.get("EXPRESSGEN_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["EXPRESSGEN_INSTALL_TIMEOUT"])
        if os.environ.get("EXPRESSGEN_ROUTE_PRESET"):
            kwargs["route_preset"] = os.environ["EXPRESSGEN_ROUTE_PRESET"]
        if os.environ.get("EXPRESSGEN_SKIP_INSTALL"):
            kwargs["skip_install"] = os.environ["EXPRESSGEN_SKIP_INSTALL"].strip().lower() in _TRUTHY
        if os.environ.get("EXPRESSGEN_MAX_ATTEMPTS"):
            kwargs["max_attempts"] = int(os.environ["EXPRESSGEN_MAX_ATTEMPTS"])
        if os.environ.get("EXPRESSGEN_LOG_LEVEL"):
            kwargs["log_level"] = os.environ["EXPRESSGEN_LOG_LEVEL"]
        return cls(**kwargs)

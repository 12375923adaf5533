"""Express Clean Architecture project generator.

Drives the whole flow around the scaffolding core:

1. Prompt for a project name and a storage engine (or take them from flags).
2. Refuse a target directory that already exists.
3. Materialize the directory tree and source files.
4. Initialise ``package.json``, install dependencies, patch the scripts block.

Any core or install failure is shown in an error panel.  Interactively the
flow restarts from the first prompt, up to ``Config.max_attempts`` times.

Usage::

    expressgen                          # interactive
    expressgen my-api --db postgres     # non-interactive
    python -m expressgen.orchestrator my-api --db none --skip-install
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from expressgen.config import Config
from expressgen.installer import InstallError, PackageManager, dependency_sets
from expressgen.scaffolder import (
    Materializer,
    RoutePreset,
    ScaffoldError,
    StorageEngine,
    StorageEngineConfig,
    available_engines,
    lookup,
)
from expressgen.utils import (
    console,
    format_duration,
    print_banner,
    print_error_panel,
    print_success,
    print_summary_table,
    print_warning,
    setup_logging,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class OrchestratorError(Exception):
    """Base class for input errors detected before the core runs."""


class InvalidProjectName(OrchestratorError):
    """Raised when the project name is empty or not a single path segment."""


class ProjectExistsError(OrchestratorError):
    """Raised when the target project directory already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Directory already exists: {path}")


RETRYABLE_ERRORS: tuple[type[Exception], ...] = (ScaffoldError, OrchestratorError, InstallError)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

# Menu number -> engine, in the order the menu is printed.
ENGINE_CHOICES: dict[str, StorageEngine] = {
    str(index): engine.id for index, engine in enumerate(available_engines(), start=1)
}


def validate_project_name(name: str | None) -> str:
    """Return the stripped project name or raise :class:`InvalidProjectName`."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidProjectName("Project name is required")
    if cleaned in {".", ".."} or "/" in cleaned or "\\" in cleaned:
        raise InvalidProjectName(
            f"Project name must be a single directory name, got {cleaned!r}"
        )
    return cleaned


def parse_engine_choice(choice: str | None) -> StorageEngine:
    """Map a menu number (``"1"``-``"3"``) or engine id to a :class:`StorageEngine`.

    Raises:
        UnknownEngine: For anything else.
    """
    cleaned = (choice or "").strip().lower()
    if cleaned in ENGINE_CHOICES:
        return ENGINE_CHOICES[cleaned]
    return lookup(cleaned).id


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectOrchestrator:
    """Prompts the user, runs the scaffolding core and installs dependencies.

    Attributes:
        config: Generator configuration.
        materializer: Writes the directory tree and files.
        package_manager: Runs ``npm init`` / ``npm install`` and patches scripts.
    """

    def __init__(
        self,
        config: Config,
        materializer: Materializer | None = None,
        package_manager: PackageManager | None = None,
    ) -> None:
        self.config = config
        self.materializer = materializer or Materializer()
        self.package_manager = package_manager or PackageManager(
            executable=config.package_manager,
            timeout=config.install_timeout,
        )

    # -- Validation --------------------------------------------------------

    def resolve_project_path(self, project_name: str) -> Path:
        """Validate *project_name* and return its not-yet-existing target path."""
        name = validate_project_name(project_name)
        project_path = self.config.project_path(name)
        if project_path.exists():
            raise ProjectExistsError(project_path)
        return project_path

    # -- Generation --------------------------------------------------------

    async def create(self, project_name: str, engine_id: StorageEngine | str) -> Path:
        """Generate a complete project and return its root path.

        Raises:
            UnknownEngine: Before anything is written.
            InvalidProjectName, ProjectExistsError: Before anything is written.
            MaterializationError: When the tree cannot be written.
            InstallError: When a package-manager step fails.
        """
        engine = lookup(engine_id)
        project_path = self.resolve_project_path(project_name)
        started = time.monotonic()

        with console.status("[yellow]Creating project structure...[/yellow]"):
            await self.materializer.materialize(
                project_path, engine.id, self.config.route_preset
            )
        print_success("Project structure created")

        with console.status("[yellow]Initialising package.json...[/yellow]"):
            await self.package_manager.init(project_path)

        if self.config.skip_install:
            print_warning("Skipping dependency installation (--skip-install)")
        else:
            runtime, dev = dependency_sets(engine.id)
            with console.status("[yellow]Installing dependencies...[/yellow]"):
                await self.package_manager.install(project_path, runtime)
            print_success("Dependencies installed")
            with console.status("[yellow]Installing dev dependencies...[/yellow]"):
                await self.package_manager.install(project_path, dev, dev=True)
            print_success("Dev dependencies installed")

        await self.package_manager.patch_manifest(project_path)

        self._print_summary(project_path, engine, time.monotonic() - started)
        return project_path

    # -- Interactive flow --------------------------------------------------

    async def run_interactive(
        self,
        project_name: str | None = None,
        engine_id: str | None = None,
    ) -> Path:
        """Prompt for the missing inputs and generate the project.

        Values passed in are used for the first attempt only; after an error
        the flow restarts from the top and prompts for everything.  The last
        error is re-raised once ``config.max_attempts`` is exhausted.
        """
        print_banner(
            "Express Clean Architecture Generator",
            "Building modern Node.js apps",
        )

        attempt = 0
        while True:
            attempt += 1
            try:
                name = project_name or self.prompt_project_name()
                self.resolve_project_path(name)
                engine = parse_engine_choice(engine_id) if engine_id else self.prompt_engine()
                return await self.create(name, engine)
            except RETRYABLE_ERRORS as exc:
                logger.debug("Attempt %d failed", attempt, exc_info=True)
                print_error_panel(str(exc))
                if attempt >= self.config.max_attempts:
                    raise
                print_warning(f"Starting over (attempt {attempt + 1}/{self.config.max_attempts})")
                project_name = engine_id = None

    def prompt_project_name(self) -> str:
        return Prompt.ask("[cyan]Project name[/cyan]", console=console)

    def prompt_engine(self) -> StorageEngine:
        """Print the storage menu and parse the answer."""
        table = Table(title="Select your database engine", header_style="bold yellow")
        table.add_column("#", style="green", justify="right")
        table.add_column("Engine", style="green")
        table.add_column("Description")
        for number, engine_id in ENGINE_CHOICES.items():
            engine = lookup(engine_id)
            table.add_row(number, engine.display_name, engine.tagline)
        console.print()
        console.print(table)

        choice = Prompt.ask(
            f"[cyan]Enter your choice (1-{len(ENGINE_CHOICES)})[/cyan]", console=console
        )
        return parse_engine_choice(choice)

    # -- Output ------------------------------------------------------------

    def _print_summary(
        self, project_path: Path, engine: StorageEngineConfig, elapsed: float
    ) -> None:
        print_summary_table(
            {
                "Project": project_path.name,
                "Location": str(project_path),
                "Storage": engine.display_name,
                "Routes": self.config.route_preset.prefix,
                "Dependencies": "skipped" if self.config.skip_install else "installed",
                "Duration": format_duration(elapsed),
            },
            title="Project created",
        )

        steps = [
            f"1. cd {project_path.name}",
            "2. cp .env.example .env",
            "3. update .env with your configuration",
        ]
        if self.config.skip_install:
            steps.append(f"4. {self.config.package_manager} install")
        steps.append(f"{len(steps) + 1}. {self.config.package_manager} run dev")

        console.print(
            Panel(
                "[bold green]Project created successfully![/bold green]\n\n"
                "[bold yellow]Next steps:[/bold yellow]\n"
                + "\n".join(f"[cyan]{escape(step)}[/cyan]" for step in steps),
                border_style="green",
                expand=False,
            )
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expressgen",
        description="Scaffold an Express.js project following Clean Architecture",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  expressgen\n"
            "  expressgen my-api --db postgres\n"
            "  expressgen my-api --db none --routes api --skip-install\n"
        ),
    )
    parser.add_argument("name", nargs="?", help="Project directory name (prompted if omitted)")
    parser.add_argument(
        "--db",
        choices=[engine.value for engine in StorageEngine],
        help="Storage engine (prompted if omitted)",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Parent directory for the project (default: current directory)",
    )
    parser.add_argument(
        "--routes",
        choices=[preset.value for preset in RoutePreset],
        default=None,
        help="Route table: 'root' mounts at / with a liveness route, 'api' mounts at /api with /health",
    )
    parser.add_argument("--package-manager", default=None, help="npm-compatible executable")
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Create package.json but do not install dependencies",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def _load_config(args: argparse.Namespace) -> Config:
    """Environment first, then command-line overrides."""
    overrides: dict[str, Any] = {}
    if args.output is not None:
        overrides["output_dir"] = args.output
    if args.routes is not None:
        overrides["route_preset"] = args.routes
    if args.package_manager is not None:
        overrides["package_manager"] = args.package_manager
    if args.skip_install:
        overrides["skip_install"] = True
    if args.verbose:
        overrides["log_level"] = "DEBUG"

    base = Config.from_env()
    return Config(**{**base.model_dump(), **overrides})


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``expressgen``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
    except (ValidationError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {exc}")
        sys.exit(1)

    setup_logging(config.log_level)
    orchestrator = ProjectOrchestrator(config)
    interactive = not (args.name and args.db)

    try:
        if interactive:
            asyncio.run(orchestrator.run_interactive(args.name, args.db))
        else:
            asyncio.run(orchestrator.create(args.name, args.db))
    except (KeyboardInterrupt, EOFError):
        console.print()
        print_warning("Aborted.")
        sys.exit(130)
    except RETRYABLE_ERRORS as exc:
        # The interactive loop has already shown every failure
        if not interactive:
            print_error_panel(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()

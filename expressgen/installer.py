"""Package-manager integration for generated projects.

Initialises ``package.json``, installs runtime and dev dependencies, and
rewrites the manifest's ``scripts`` block.  Every external call goes through
:func:`expressgen.utils.run_command`; a non-zero exit is raised as
:class:`InstallError` and never retried here.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from expressgen.scaffolder.registry import StorageEngine, lookup
from expressgen.utils import run_command

logger = logging.getLogger(__name__)


BASE_DEPENDENCIES: tuple[str, ...] = (
    "express",
    "cors",
    "helmet",
    "dotenv",
    "winston",
    "jsonwebtoken",
)

BASE_DEV_DEPENDENCIES: tuple[str, ...] = (
    "nodemon",
    "jest",
    "supertest",
    "eslint",
    "prettier",
)

PATCH_COMMAND = "patch package.json"

MANIFEST_SCRIPTS: dict[str, str] = {
    "start": "node src/server.js",
    "dev": "nodemon src/server.js",
    "test": "jest",
    "lint": "eslint .",
    "format": 'prettier --write "src/**/*.js"',
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InstallError(Exception):
    """Raised when a package-manager step fails."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


# ---------------------------------------------------------------------------
# Dependency selection
# ---------------------------------------------------------------------------


def dependency_sets(engine_id: StorageEngine | str) -> tuple[list[str], list[str]]:
    """Return ``(runtime, dev)`` package lists for *engine_id*.

    The engine's own dependencies are appended after the base lists.
    """
    engine = lookup(engine_id)
    runtime = [*BASE_DEPENDENCIES, *engine.runtime_dependencies]
    dev = [*BASE_DEV_DEPENDENCIES, *engine.dev_dependencies]
    return runtime, dev


# ---------------------------------------------------------------------------
# PackageManager
# ---------------------------------------------------------------------------


class PackageManager:
    """Thin async wrapper around an npm-compatible CLI."""

    def __init__(self, executable: str = "npm", timeout: int = 600) -> None:
        self.executable = executable
        self.timeout = timeout

    async def init(self, project_root: Path) -> None:
        """Create a default ``package.json`` in *project_root*."""
        await self._run([self.executable, "init", "-y"], project_root)

    async def install(
        self,
        project_root: Path,
        packages: Sequence[str],
        *,
        dev: bool = False,
    ) -> None:
        """Install *packages*, as dev dependencies when *dev* is set."""
        if not packages:
            return
        cmd = [self.executable, "install"]
        if dev:
            cmd.append("-D")
        cmd.extend(packages)
        await self._run(cmd, project_root)

    async def patch_manifest(self, project_root: Path) -> dict[str, Any]:
        """Replace the ``scripts`` block of ``package.json``.

        Other keys are preserved.  Returns the written manifest.
        """
        manifest_path = Path(project_root) / "package.json"
        try:
            text = await asyncio.to_thread(manifest_path.read_text, encoding="utf-8")
        except FileNotFoundError:
            raise InstallError(
                f"package.json not found in {project_root}", command=PATCH_COMMAND
            ) from None
        except OSError as exc:
            raise InstallError(
                f"Cannot read {manifest_path}: {exc.strerror or exc}", command=PATCH_COMMAND
            ) from exc

        try:
            manifest = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InstallError(
                f"package.json is not valid JSON: {exc}", command=PATCH_COMMAND
            ) from exc

        if not isinstance(manifest, dict):
            raise InstallError("package.json must contain a JSON object", command=PATCH_COMMAND)

        manifest["scripts"] = dict(MANIFEST_SCRIPTS)
        try:
            await asyncio.to_thread(
                manifest_path.write_text, json.dumps(manifest, indent=2), encoding="utf-8"
            )
        except OSError as exc:
            raise InstallError(
                f"Cannot write {manifest_path}: {exc.strerror or exc}", command=PATCH_COMMAND
            ) from exc
        return manifest

    async def _run(self, cmd: list[str], cwd: Path) -> str:
        cmd_str = " ".join(cmd)
        logger.debug("Running %s in %s", cmd_str, cwd)
        try:
            returncode, stdout, stderr = await run_command(cmd, cwd=cwd, timeout=self.timeout)
        except FileNotFoundError:
            raise InstallError(
                f"Package manager not found: {self.executable}", command=cmd_str
            ) from None

        if returncode != 0:
            raise InstallError(
                f"Command failed (exit {returncode}): {cmd_str}",
                command=cmd_str,
                stderr=stderr,
            )
        return stdout

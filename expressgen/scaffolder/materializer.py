"""Writes a directory plan and template set to disk.

Every filesystem call runs in a worker thread but is awaited before the next one
starts, so directories and files are always created in plan/template order.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .directory_plan import plan
from .errors import MaterializationError
from .registry import StorageEngine, lookup
from .template_set import CONNECTION_ROOT, RoutePreset, build_base, connection_module
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


class Materializer:
    """Creates the project tree under a target root.

    The target root itself is created if missing.  Nothing is rolled back on
    failure: a :class:`MaterializationError` may leave a partially populated
    directory behind.
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    async def materialize(
        self,
        target_root: str | Path,
        engine_id: StorageEngine | str,
        preset: RoutePreset | str = RoutePreset.ROOT,
    ) -> None:
        """Create directories and write every scaffold file for *engine_id*.

        Args:
            target_root: Project root; relative paths are resolved against it.
            engine_id: Registered storage-engine identifier.
            preset: Route table variant for the generated app.

        Raises:
            UnknownEngine: Before anything touches the disk.
            MaterializationError: When a directory or file cannot be written.
        """
        root = Path(target_root)

        # Resolve and render everything before touching the disk
        engine = lookup(engine_id)
        directories = plan(engine.id)
        files = build_base(engine.id, preset, self.renderer)
        connection = connection_module(engine.id, self.renderer)

        for directory in directories:
            await self._mkdir(root / directory)

        for relative_path, content in files.items():
            await self._write(root / relative_path, content)

        if connection is not None:
            relative_path, content = connection
            await self._mkdir(root / CONNECTION_ROOT)
            await self._write(root / relative_path, content)

        logger.debug(
            "Materialized %d directories and %d files for %s in %s",
            len(directories),
            len(files) + (1 if connection else 0),
            engine.id.value,
            root,
        )

    async def _mkdir(self, path: Path) -> None:
        logger.debug("mkdir %s", path)
        try:
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise MaterializationError(path, exc) from exc

    async def _write(self, path: Path, content: str) -> None:
        logger.debug("write %s", path)
        try:
            await asyncio.to_thread(_write_file, path, content.strip())
        except OSError as exc:
            raise MaterializationError(path, exc) from exc


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: write content, overwriting any existing file."""
    path.write_text(content, encoding="utf-8")

"""Template selection: storage-engine id -> ``{relative_path: content}``.

Everything here is pure.  Content is returned untrimmed; surrounding blank
lines are stripped by the :class:`~expressgen.scaffolder.materializer.Materializer`
at write time.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .registry import StorageEngine, StorageEngineConfig, lookup
from .templates import TemplateRenderer


CONNECTION_ROOT = "src/infrastructure/database"
CONNECTION_MODULE_PATH = f"{CONNECTION_ROOT}/index.js"
SERVER_PATH = "src/server.js"


class RoutePreset(str, Enum):
    """Which route table the generated app mounts.

    ``root`` mounts the router at ``/`` with a root liveness handler; ``api``
    mounts it at ``/api`` with a ``/health`` endpoint.
    """

    ROOT = "root"
    API = "api"

    @property
    def prefix(self) -> str:
        return "/api" if self is RoutePreset.API else "/"


# Relative output path -> template name.  Storage-agnostic apart from the
# env block interpolated into ``.env.example``.
BASE_TEMPLATES: dict[str, str] = {
    "src/app.js": "app.js.j2",
    "src/infrastructure/logger/index.js": "logger.js.j2",
    "src/interfaces/middlewares/errorHandler.js": "error_handler.js.j2",
    "src/interfaces/routes/index.js": "routes.js.j2",
    "README.md": "README.md.j2",
    ".env.example": "env.example.j2",
    ".gitignore": "gitignore.j2",
}

SERVER_TEMPLATES: dict[bool, str] = {
    False: "server/plain.js.j2",
    True: "server/storage.js.j2",
}


_default_renderer: TemplateRenderer | None = None


def _get_renderer(renderer: TemplateRenderer | None) -> TemplateRenderer:
    global _default_renderer
    if renderer is not None:
        return renderer
    if _default_renderer is None:
        _default_renderer = TemplateRenderer()
    return _default_renderer


def _build_context(engine: StorageEngineConfig, preset: RoutePreset) -> dict[str, Any]:
    """Build the Jinja2 context shared by every template."""
    return {
        "engine_id": engine.id.value,
        "display_name": engine.display_name,
        "uses_storage": engine.uses_storage,
        "env_block": engine.env_block.strip(),
        "preset": preset.value,
        "route_prefix": preset.prefix,
    }


def build_base(
    engine_id: StorageEngine | str,
    preset: RoutePreset | str = RoutePreset.ROOT,
    renderer: TemplateRenderer | None = None,
) -> dict[str, str]:
    """Render every fixed scaffold file for *engine_id*.

    The connection module is not part of this set; see
    :func:`connection_module`.

    Raises:
        UnknownEngine: If *engine_id* is not registered.
    """
    engine = lookup(engine_id)
    preset = RoutePreset(preset)
    renderer = _get_renderer(renderer)
    context = _build_context(engine, preset)

    files = {
        path: renderer.render(template_name, context)
        for path, template_name in BASE_TEMPLATES.items()
    }
    # server.js comes last
    files[SERVER_PATH] = renderer.render(SERVER_TEMPLATES[engine.uses_storage], context)
    return files


def connection_module(
    engine_id: StorageEngine | str,
    renderer: TemplateRenderer | None = None,
) -> tuple[str, str] | None:
    """Return ``(path, content)`` of the storage connection bootstrap.

    ``None`` when the engine needs no connection module.
    """
    engine = lookup(engine_id)
    if not engine.uses_storage or not engine.connection_module_template:
        return None
    renderer = _get_renderer(renderer)
    content = renderer.render(
        engine.connection_module_template,
        _build_context(engine, RoutePreset.ROOT),
    )
    return CONNECTION_MODULE_PATH, content


def build(
    engine_id: StorageEngine | str,
    preset: RoutePreset | str = RoutePreset.ROOT,
    renderer: TemplateRenderer | None = None,
) -> dict[str, str]:
    """Return the complete ``{relative_path: content}`` set for *engine_id*.

    This is :func:`build_base` plus the connection module, when the engine has
    one.
    """
    files = build_base(engine_id, preset, renderer)
    connection = connection_module(engine_id, renderer)
    if connection is not None:
        path, content = connection
        if path in files:
            raise ValueError(f"connection module path collides with base template: {path}")
        files[path] = content
    return files

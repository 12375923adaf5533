"""Directory layout for a generated project."""

from __future__ import annotations

from .registry import StorageEngine, lookup
from .template_set import CONNECTION_ROOT


# Domain, application, infrastructure and interface layers plus tests and logs.
BASE_DIRECTORIES: tuple[str, ...] = (
    "src/domain/entities",
    "src/domain/repositories",
    "src/domain/services",
    "src/domain/value-objects",
    "src/application/use-cases",
    "src/application/services",
    "src/infrastructure/logger",
    "src/infrastructure/security",
    "src/interfaces/controllers",
    "src/interfaces/middlewares",
    "src/interfaces/routes",
    "src/interfaces/validators",
    "tests/unit",
    "tests/integration",
    "logs",
)

STORAGE_DIRECTORIES: tuple[str, ...] = (
    CONNECTION_ROOT,
    f"{CONNECTION_ROOT}/models",
    f"{CONNECTION_ROOT}/migrations",
    f"{CONNECTION_ROOT}/seeders",
)


def plan(engine_id: StorageEngine | str) -> tuple[str, ...]:
    """Return the directories to create for *engine_id*, in creation order.

    Raises:
        UnknownEngine: If *engine_id* is not registered.
    """
    engine = lookup(engine_id)
    if engine.uses_storage:
        return BASE_DIRECTORIES + STORAGE_DIRECTORIES
    return BASE_DIRECTORIES

"""Storage-engine registry.

One immutable :class:`StorageEngineConfig` per supported engine, including the
``none`` sentinel.  The table is built once at import time and exposed through a
read-only mapping; :func:`lookup` is the only way the rest of the core resolves
an identifier.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownEngine


class StorageEngine(str, Enum):
    """Closed set of storage-engine identifiers."""

    POSTGRES = "postgres"
    MONGODB = "mongodb"
    NONE = "none"


class StorageEngineConfig(BaseModel):
    """Metadata and templates for a single storage engine."""

    model_config = ConfigDict(frozen=True)

    id: StorageEngine
    display_name: str
    tagline: str = Field(default="", description="One-line description shown in the prompt menu")
    runtime_dependencies: tuple[str, ...] = Field(
        default=(), description="npm packages required at runtime"
    )
    dev_dependencies: tuple[str, ...] = Field(
        default=(), description="npm packages required only for local tooling"
    )
    connection_module_template: str = Field(
        ...,
        description="Template name of the connection bootstrap file, empty when no storage is used",
    )
    env_block: str = Field(
        ..., description="Fragment spliced into .env.example, empty when no storage is used"
    )

    @property
    def uses_storage(self) -> bool:
        return self.id is not StorageEngine.NONE


_POSTGRES_ENV = """\
# Database - PostgreSQL
DB_HOST=localhost
DB_PORT=5432
DB_NAME=app_db
DB_USER=postgres
DB_PASSWORD=postgres"""

_MONGODB_ENV = """\
# Database - MongoDB
MONGODB_URI=mongodb://localhost:27017/app_db"""


REGISTRY: Mapping[StorageEngine, StorageEngineConfig] = MappingProxyType({
    StorageEngine.POSTGRES: StorageEngineConfig(
        id=StorageEngine.POSTGRES,
        display_name="PostgreSQL",
        tagline="Robust relational database",
        runtime_dependencies=("pg", "pg-hstore", "sequelize"),
        dev_dependencies=("sequelize-cli",),
        connection_module_template="connection/postgres.js.j2",
        env_block=_POSTGRES_ENV,
    ),
    StorageEngine.MONGODB: StorageEngineConfig(
        id=StorageEngine.MONGODB,
        display_name="MongoDB",
        tagline="Flexible NoSQL database",
        runtime_dependencies=("mongoose",),
        dev_dependencies=(),
        connection_module_template="connection/mongodb.js.j2",
        env_block=_MONGODB_ENV,
    ),
    StorageEngine.NONE: StorageEngineConfig(
        id=StorageEngine.NONE,
        display_name="No Database",
        tagline="No database setup",
        runtime_dependencies=(),
        dev_dependencies=(),
        connection_module_template="",
        env_block="",
    ),
})


def lookup(engine_id: StorageEngine | str) -> StorageEngineConfig:
    """Return the config for *engine_id*.

    Accepts either a :class:`StorageEngine` member or its string value.

    Raises:
        UnknownEngine: If the identifier is not one of the registered engines.
    """
    try:
        key = StorageEngine(engine_id)
    except ValueError:
        raise UnknownEngine(engine_id, known=[e.value for e in StorageEngine]) from None
    return REGISTRY[key]


def available_engines() -> tuple[StorageEngineConfig, ...]:
    """Every registered engine, in prompt-menu order."""
    return tuple(REGISTRY.values())

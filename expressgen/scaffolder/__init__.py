"""Scaffolding core -- turns a storage-engine choice into a project tree.

Given one of the registered storage engines (``postgres``, ``mongodb`` or
``none``), the core computes a directory plan and a set of rendered files, then
writes them below a target directory.  It prints nothing and never retries;
errors propagate to the caller.

Quick usage::

    from expressgen.scaffolder import Materializer

    await Materializer().materialize("/tmp/my-api", "postgres")
"""

from expressgen.scaffolder.directory_plan import plan
from expressgen.scaffolder.errors import MaterializationError, ScaffoldError, UnknownEngine
from expressgen.scaffolder.materializer import Materializer
from expressgen.scaffolder.registry import (
    REGISTRY,
    StorageEngine,
    StorageEngineConfig,
    available_engines,
    lookup,
)
from expressgen.scaffolder.template_set import RoutePreset, build, build_base, connection_module
from expressgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "REGISTRY",
    "MaterializationError",
    "Materializer",
    "RoutePreset",
    "ScaffoldError",
    "StorageEngine",
    "StorageEngineConfig",
    "TemplateRenderer",
    "UnknownEngine",
    "available_engines",
    "build",
    "build_base",
    "connection_module",
    "lookup",
    "plan",
]

"""Shared pytest fixtures for the expressgen test suite.

Provides reusable fixtures for:
- Temporary target directories
- A shared template renderer
- A mocked package manager that fakes ``npm init`` without a subprocess
- A Config pointed at a temporary output directory
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from expressgen.config import Config
from expressgen.installer import PackageManager
from expressgen.scaffolder import StorageEngine, TemplateRenderer


ALL_ENGINES = [engine.value for engine in StorageEngine]
STORAGE_ENGINES = [StorageEngine.POSTGRES.value, StorageEngine.MONGODB.value]


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def target_root(tmp_path: Path) -> Path:
    """Not-yet-existing project root inside a temp directory."""
    return tmp_path / "my-api"


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory that generated projects are created in."""
    out = tmp_path / "workspace"
    out.mkdir()
    return out


# ---------------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def renderer() -> TemplateRenderer:
    """Renderer over the packaged templates."""
    return TemplateRenderer()


@pytest.fixture(params=ALL_ENGINES)
def engine_id(request) -> str:
    """Every registered engine id."""
    return request.param


@pytest.fixture(params=STORAGE_ENGINES)
def storage_engine_id(request) -> str:
    """Engine ids that ship a connection module."""
    return request.param


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


@pytest.fixture
def config(output_dir: Path) -> Config:
    """Config writing into the temp output directory, one attempt only."""
    return Config(output_dir=output_dir, max_attempts=1)


@pytest.fixture
def mock_package_manager() -> MagicMock:
    """A PackageManager whose ``init`` writes a minimal package.json.

    ``install`` is a no-op AsyncMock; ``patch_manifest`` awaits the real method so
    the scripts block is exercised.
    """
    real = PackageManager()
    pm = MagicMock(spec=PackageManager)

    async def fake_init(project_root: Path) -> None:
        manifest = {"name": Path(project_root).name, "version": "1.0.0", "main": "index.js"}
        (Path(project_root) / "package.json").write_text(json.dumps(manifest), encoding="utf-8")

    pm.init = AsyncMock(side_effect=fake_init)
    pm.install = AsyncMock(return_value=None)
    pm.patch_manifest = AsyncMock(side_effect=real.patch_manifest)
    return pm

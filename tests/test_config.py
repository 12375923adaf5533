"""Unit tests for Config (expressgen.config).

Tests cover:
- Defaults
- Validation of bounds and log level
- project_path resolution
- from_env with and without variables
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from expressgen.config import Config
from expressgen.scaffolder.template_set import RoutePreset


pytestmark = pytest.mark.unit


class TestDefaults:
    def test_defaults(self):
        config = Config()
        assert config.output_dir == Path.cwd()
        assert config.package_manager == "npm"
        assert config.install_timeout == 600
        assert config.route_preset is RoutePreset.ROOT
        assert config.skip_install is False
        assert config.max_attempts == 3
        assert config.log_level == "WARNING"

    def test_route_preset_from_string(self):
        assert Config(route_preset="api").route_preset is RoutePreset.API


class TestValidation:
    def test_timeout_lower_bound(self):
        with pytest.raises(ValidationError):
            Config(install_timeout=5)

    def test_max_attempts_lower_bound(self):
        with pytest.raises(ValidationError):
            Config(max_attempts=0)

    def test_empty_package_manager(self):
        with pytest.raises(ValidationError):
            Config(package_manager="")

    def test_invalid_route_preset(self):
        with pytest.raises(ValidationError):
            Config(route_preset="graphql")

    def test_log_level_normalised(self):
        assert Config(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Config(log_level="chatty")


class TestProjectPath:
    def test_joins_and_resolves(self, tmp_path: Path):
        config = Config(output_dir=tmp_path)
        assert config.project_path("my-api") == (tmp_path / "my-api").resolve()

    def test_relative_output_dir_is_absolute(self):
        config = Config(output_dir=Path("relative"))
        assert config.project_path("x").is_absolute()


class TestFromEnv:
    def test_without_variables(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config.package_manager == "npm"
        assert config.skip_install is False

    def test_reads_variables(self, tmp_path: Path):
        env = {
            "EXPRESSGEN_OUTPUT_DIR": str(tmp_path),
            "EXPRESSGEN_PACKAGE_MANAGER": "pnpm",
            "EXPRESSGEN_INSTALL_TIMEOUT": "120",
            "EXPRESSGEN_ROUTE_PRESET": "api",
            "EXPRESSGEN_SKIP_INSTALL": "yes",
            "EXPRESSGEN_MAX_ATTEMPTS": "5",
            "EXPRESSGEN_LOG_LEVEL": "info",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.output_dir == tmp_path
        assert config.package_manager == "pnpm"
        assert config.install_timeout == 120
        assert config.route_preset is RoutePreset.API
        assert config.skip_install is True
        assert config.max_attempts == 5
        assert config.log_level == "INFO"

    @pytest.mark.parametrize("value", ["0", "false", "no", "off"])
    def test_skip_install_falsy(self, value):
        with patch.dict(os.environ, {"EXPRESSGEN_SKIP_INSTALL": value}, clear=True):
            assert Config.from_env().skip_install is False

    def test_invalid_timeout(self):
        with patch.dict(os.environ, {"EXPRESSGEN_INSTALL_TIMEOUT": "abc"}, clear=True):
            with pytest.raises(ValueError):
                Config.from_env()

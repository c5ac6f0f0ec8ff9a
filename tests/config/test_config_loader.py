# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the config loader.

We check that:
  1. Valid YAML loads into a frozen, correct config object
  2. Missing `pipeline:` falls back to the CI defaults
  3. Schema violations raise ConfigValidationError
  4. Broken or missing files raise ConfigLoadError
"""

import textwrap
from pathlib import Path

import pytest

from rustci.config.exceptions import ConfigLoadError, ConfigValidationError
from rustci.config.loader import default_config, load_config


class TestLoadValidConfig:
    def test_loads_minimal_valid_config(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        assert config.global_config.config_version == "1.0.0"
        assert config.global_config.log_level == "DEBUG"
        assert config.global_config.log_file is None

    def test_pipeline_defaults_when_section_missing(self, tmp_config_file: Path) -> None:
        pipeline = load_config(tmp_config_file).pipeline
        assert pipeline.cargo == "cargo"
        assert pipeline.release_flag == "--release"
        assert pipeline.diagnostics_variable == "RUST_BACKTRACE"
        assert pipeline.diagnostics_value == "1"
        assert pipeline.fail_on_test_failure is False
        assert pipeline.working_directory is None

    def test_loads_full_pipeline_section(self, tmp_path: Path) -> None:
        content = textwrap.dedent("""\
            global:
              config_version: "1.0.0"
              log_level: "WARNING"
              log_file: "logs/ci.jsonl"
            pipeline:
              cargo: "/opt/rust/bin/cargo"
              working_directory: "crates/core"
              release_flag: "--profile=bench"
              fail_on_test_failure: true
        """)
        config_file = tmp_path / "full.yaml"
        config_file.write_text(content, encoding="utf-8")

        config = load_config(config_file)
        assert config.global_config.log_file == "logs/ci.jsonl"
        assert config.pipeline.cargo == "/opt/rust/bin/cargo"
        assert config.pipeline.working_directory == "crates/core"
        assert config.pipeline.release_flag == "--profile=bench"
        assert config.pipeline.fail_on_test_failure is True

    def test_default_config_matches_empty_file_defaults(self, tmp_config_file: Path) -> None:
        assert default_config().pipeline == load_config(tmp_config_file).pipeline
        assert default_config().global_config.log_level == "INFO"


class TestLoadInvalidConfig:
    def test_missing_required_field_raises_validation_error(
        self, invalid_config_file: Path
    ) -> None:
        with pytest.raises(ConfigValidationError):
            load_config(invalid_config_file)

    def test_unknown_pipeline_field_raises_validation_error(self, tmp_path: Path) -> None:
        content = textwrap.dedent("""\
            global:
              config_version: "1.0.0"
            pipeline:
              retries: 3
        """)
        config_file = tmp_path / "unknown_field.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_bad_log_level_raises_validation_error(self, tmp_path: Path) -> None:
        content = textwrap.dedent("""\
            global:
              config_version: "1.0.0"
              log_level: "LOUD"
        """)
        config_file = tmp_path / "bad_level.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_broken_yaml_raises_load_error(self, broken_yaml_file: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(broken_yaml_file)

    def test_non_mapping_yaml_raises_load_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- build\n- test\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(config_file)

    def test_nonexistent_file_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(tmp_path / "does_not_exist.yaml")

    def test_directory_path_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(tmp_path)


class TestConfigImmutability:
    def test_cannot_mutate_frozen_pipeline(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        with pytest.raises(Exception):
            config.pipeline.release_flag = "--debug"  # type: ignore[misc]

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for rustci tests.

Besides config files, this provides `fake_cargo`: a real executable on disk
that records each invocation (arguments and the RUST_BACKTRACE it saw) and
exits with a per-subcommand status, so the runner can be exercised end to end
without a Rust toolchain.
"""

import json
import logging
import os
import stat
import sys
import textwrap
from collections.abc import Iterator
from pathlib import Path
from unittest import mock

import pytest

_FAKE_CARGO_SCRIPT = textwrap.dedent("""\
    import json
    import os
    import sys

    with open(os.environ["FAKE_CARGO_LOG"], "a", encoding="utf-8") as log:
        log.write(json.dumps({
            "argv": sys.argv[1:],
            "backtrace": os.environ.get("RUST_BACKTRACE"),
            "cwd": os.getcwd(),
        }) + "\\n")

    codes = json.loads(os.environ.get("FAKE_CARGO_EXIT_CODES", "{}"))
    subcommand = sys.argv[1] if len(sys.argv) > 1 else ""
    sys.exit(codes.get(subcommand, 0))
""")


class FakeCargo:
    """Handle on the fake cargo executable and its invocation log."""

    def __init__(self, root: Path) -> None:
        root.mkdir(parents=True, exist_ok=True)
        self.log_path = root / "calls.jsonl"
        script = root / "fake_cargo.py"
        script.write_text(_FAKE_CARGO_SCRIPT, encoding="utf-8")

        self.path = root / "cargo"
        self.path.write_text(
            f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n', encoding="utf-8",
        )
        self.path.chmod(self.path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def set_exit_codes(self, **codes: int) -> None:
        os.environ["FAKE_CARGO_EXIT_CODES"] = json.dumps(codes)

    def calls(self) -> list[dict]:
        if not self.log_path.exists():
            return []
        lines = self.log_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]

    def subcommands(self) -> list[str]:
        return [call["argv"][0] for call in self.calls()]


@pytest.fixture(autouse=True)
def _isolated_environment() -> Iterator[None]:
    """Undo any os.environ changes (RUST_BACKTRACE, PROFILE, ...) after each test."""
    with mock.patch.dict(os.environ, clear=False):
        os.environ.pop("PROFILE", None)
        os.environ.pop("RUST_BACKTRACE", None)
        yield


@pytest.fixture(autouse=True)
def _reset_loggers() -> Iterator[None]:
    """Drop handlers of the loggers tests create, so each test starts clean."""
    yield
    for name, existing in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith("rustci.test") and isinstance(existing, logging.Logger):
            for handler in list(existing.handlers):
                existing.removeHandler(handler)
                handler.close()
        elif name.startswith("rustci") and isinstance(existing, logging.Logger):
            # Log files configured by a CLI run must not outlive the test.
            for handler in list(existing.handlers):
                if isinstance(handler, logging.FileHandler):
                    existing.removeHandler(handler)
                    handler.close()


@pytest.fixture()
def fake_cargo(tmp_path: Path) -> FakeCargo:
    cargo = FakeCargo(tmp_path / "fake_cargo")
    os.environ["FAKE_CARGO_LOG"] = str(cargo.log_path)
    os.environ["FAKE_CARGO_EXIT_CODES"] = "{}"
    return cargo


@pytest.fixture()
def fake_cargo_config(tmp_path: Path, fake_cargo: FakeCargo) -> Path:
    """A config file whose pipeline runs the fake cargo."""
    config_content = textwrap.dedent(f"""\
        global:
          config_version: "1.0.0"
          log_level: "WARNING"
        pipeline:
          cargo: "{fake_cargo.path}"
    """)
    config_file = tmp_path / "fake_cargo_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (missing config_version)."""
    config_content = textwrap.dedent("""\
        global:
          log_level: "INFO"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for rustci.

Each config section gets its own frozen pydantic model. Frozen means once you
create it, you cannot mutate it: the profile and the step plan are derived
from this once per run and must not drift while steps execute.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

CONFIG_VERSION = "1.0.0"
RELEASE_FLAG = "--release"
DIAGNOSTICS_VARIABLE = "RUST_BACKTRACE"
DIAGNOSTICS_VALUE = "1"


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for JSON-lines log output",
    )


class PipelineConfig(BaseModel):
    """
    How the build, test and bench steps are invoked.

    The defaults reproduce the plain CI behaviour: `cargo` from PATH, run in
    the current directory, backtraces on, test failures tolerated.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    cargo: str = Field(
        default="cargo",
        min_length=1,
        description="Cargo executable name (looked up on PATH) or path",
    )
    working_directory: Optional[str] = Field(
        default=None,
        description="Directory the steps run in; None means the current directory",
    )
    release_flag: str = Field(
        default=RELEASE_FLAG,
        min_length=1,
        description="Profile value that selects the release path and enables benchmarks",
    )
    diagnostics_variable: str = Field(
        default=DIAGNOSTICS_VARIABLE,
        min_length=1,
        description="Environment variable exported before any step runs",
    )
    diagnostics_value: str = Field(
        default=DIAGNOSTICS_VALUE,
        description="Fixed value assigned to the diagnostics variable",
    )
    fail_on_test_failure: bool = Field(
        default=False,
        description="Treat a failing test step as fatal instead of suppressing it",
    )


class RustCIConfig(BaseModel):
    """
    Top-level config container.

    A file may contain just `global:`; a missing `pipeline:` section falls
    back to the defaults above.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for rustci.

The one-time setup that happens before any step is spawned:
  1. Validate the environment (Python version)
  2. Point every rustci logger at the configured level and log file
  3. Export the diagnostics variable (RUST_BACKTRACE=1 by default)

Once bootstrap returns, every child process started by the runner inherits
verbose backtraces.
"""

import os
from collections.abc import MutableMapping
from pathlib import Path
from typing import Optional

from rustci.config.schema import DIAGNOSTICS_VALUE, DIAGNOSTICS_VARIABLE, RustCIConfig
from rustci.logging.logger import configure_logging, get_logger
from rustci.runtime.environment import check_minimum_python, get_system_info


def export_diagnostics(
    environ: Optional[MutableMapping[str, str]] = None,
    name: str = DIAGNOSTICS_VARIABLE,
    value: str = DIAGNOSTICS_VALUE,
) -> MutableMapping[str, str]:
    """
    Set the diagnostics variable on `environ` (os.environ by default).

    The value is fixed; whatever the caller had exported is overwritten.
    Returns the mapping so callers can hand it straight to the runner.
    """
    target = os.environ if environ is None else environ
    target[name] = value
    return target


def bootstrap(
    config: RustCIConfig,
    log_level: Optional[str] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> MutableMapping[str, str]:
    """
    Run the bootstrap sequence and return the environment steps should use.

    Args:
        config: The validated configuration.
        log_level: Command-line override for config.global_config.log_level.
        environ: Environment mapping to mutate; os.environ when omitted.
    """
    check_minimum_python()

    level = log_level or config.global_config.log_level
    log_file = None
    if config.global_config.log_file is not None:
        log_file = Path(config.global_config.log_file)

    logger = get_logger("rustci.runtime", log_level=level, log_file=log_file)
    configure_logging(level, log_file)

    pipeline = config.pipeline
    env = export_diagnostics(
        environ, pipeline.diagnostics_variable, pipeline.diagnostics_value,
    )

    system_info = get_system_info()
    logger.info(
        "rustci bootstrap complete",
        extra={
            "diagnostics_variable": pipeline.diagnostics_variable,
            "diagnostics_value": pipeline.diagnostics_value,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
        },
    )
    return env

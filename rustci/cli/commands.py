# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the rustci CLI.

Each function takes the parsed argparse namespace and returns the process
exit code. No print() calls; everything goes through the structured logger.
"""

import argparse
import logging
import os
from collections.abc import MutableMapping
from pathlib import Path
from typing import Optional

from rustci.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS
from rustci.config.exceptions import ConfigError
from rustci.config.loader import default_config, load_config
from rustci.config.schema import RustCIConfig
from rustci.logging.logger import get_logger
from rustci.pipeline.plan import build_plan, is_release, resolve_profile
from rustci.pipeline.runner import run_pipeline
from rustci.runtime.bootstrap import bootstrap


def _command_logger(args: argparse.Namespace, command_name: str) -> logging.Logger:
    return get_logger(f"rustci.cli.{command_name}", log_level=args.log_level or "INFO")


def _load(
    args: argparse.Namespace,
    logger: logging.Logger,
    command_name: str,
) -> Optional[RustCIConfig]:
    """Load --config if given, defaults otherwise. None means a config error was logged."""
    if args.config is None:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )
        return default_config()

    try:
        return load_config(Path(args.config))
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return None


def _working_directory(config: RustCIConfig) -> Optional[Path]:
    if config.pipeline.working_directory is None:
        return None
    return Path(config.pipeline.working_directory)


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[RustCIConfig], Optional[MutableMapping[str, str]], logging.Logger]:
    """
    Shared setup for commands that spawn steps: load config, run bootstrap.

    Returns (exit_code, config, env, logger). If exit_code is not SUCCESS the
    caller returns it straight away.
    """
    logger = _command_logger(args, command_name)

    config = _load(args, logger, command_name)
    if config is None:
        return CONFIG_ERROR, None, None, logger

    cwd = _working_directory(config)
    if cwd is not None and not cwd.is_dir():
        logger.error(
            "Configuration error",
            extra={
                "command": command_name,
                "error": f"working_directory is not a directory: {cwd}",
            },
        )
        return CONFIG_ERROR, None, None, logger

    try:
        env = bootstrap(config, log_level=args.log_level)
    except (RuntimeError, ValueError, OSError) as err:
        logger.error(
            "Bootstrap failed",
            extra={"command": command_name, "error": str(err)},
            exc_info=True,
        )
        return RUNTIME_ERROR, None, None, logger

    return SUCCESS, config, env, logger


def _resolve_cli_profile(args: argparse.Namespace, config: RustCIConfig) -> Optional[str]:
    if args.release:
        return config.pipeline.release_flag
    return args.profile


def handle_run(args: argparse.Namespace) -> int:
    """Build examples, run tests, and benchmark on release profiles."""
    exit_code, config, env, logger = _load_and_bootstrap(args, "run")
    if exit_code != SUCCESS:
        return exit_code

    profile = resolve_profile(_resolve_cli_profile(args, config), env)
    steps = build_plan(profile, config.pipeline)

    logger.info(
        "Command started",
        extra={
            "command": "run",
            "profile": profile,
            "release": is_release(profile, config.pipeline.release_flag),
            "steps": [step.name for step in steps],
            "dry_run": args.dry_run,
        },
    )

    result = run_pipeline(
        steps,
        profile=profile,
        env=env,
        cwd=_working_directory(config),
        dry_run=args.dry_run,
    )

    logger.info(
        "Command completed",
        extra={
            "command": "run",
            "exit_code": result.exit_code,
            "executed_steps": result.executed_steps,
            "suppressed_failures": [r.step.name for r in result.suppressed_failures],
        },
    )
    return result.exit_code


def handle_plan(args: argparse.Namespace) -> int:
    """Log the steps `run` would execute, without spawning anything."""
    logger = _command_logger(args, "plan")
    config = _load(args, logger, "plan")
    if config is None:
        return CONFIG_ERROR

    profile = resolve_profile(_resolve_cli_profile(args, config), os.environ)
    for index, step in enumerate(build_plan(profile, config.pipeline), start=1):
        logger.info(
            "Planned step",
            extra={
                "index": index,
                "step": step.name,
                "command": step.command_line,
                "policy": step.policy.value,
                "profile": profile,
            },
        )
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    logger = _command_logger(args, "info")

    from rustci import __version__
    from rustci.runtime.environment import find_cargo, get_system_info

    config = _load(args, logger, "info")
    if config is None:
        return CONFIG_ERROR

    system_info = get_system_info()
    logger.info(
        "System information",
        extra={
            "rustci_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "cargo": find_cargo(config.pipeline.cargo),
            "config": args.config,
        },
    )
    return SUCCESS

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for rustci.

Usage:
    rustci run                       # cargo build --examples; cargo test
    rustci run --release             # ... plus cargo bench
    rustci run --profile=--release   # same, with the profile spelled out
    PROFILE=--release rustci run     # same, profile taken from the environment
    rustci plan --release            # log the steps without running them
    rustci info

The global options (--config, --log-level) are accepted before or after the
subcommand; --dry-run belongs to `run` only.
"""

import argparse
import sys

from rustci.cli.commands import handle_info, handle_plan, handle_run
from rustci.cli.exit_codes import USER_ERROR


def _build_global_parser(suppress_defaults: bool = False) -> argparse.ArgumentParser:
    """
    Options accepted both before and after the subcommand.

    The root parser owns the defaults. Subcommand copies are built with
    suppress_defaults=True so they only set a value when the option is given
    there, instead of resetting what the root parser already parsed.
    """
    default = argparse.SUPPRESS if suppress_defaults else None
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=default,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=default,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config file).",
    )
    return parent


def _build_run_parser() -> argparse.ArgumentParser:
    """Options that only make sense for `run`."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Log the steps instead of running them.",
    )
    return parent


def _build_profile_parser() -> argparse.ArgumentParser:
    """The profile selector shared by `run` and `plan`."""
    parent = argparse.ArgumentParser(add_help=False)
    group = parent.add_mutually_exclusive_group()
    group.add_argument(
        "--profile",
        type=str,
        default=None,
        help=(
            "Profile argument passed verbatim to cargo build and cargo test. "
            "Use --profile=VALUE for values starting with '-'. Defaults to $PROFILE."
        ),
    )
    group.add_argument(
        "--release",
        action="store_true",
        default=False,
        help="Shorthand for the release profile; also runs cargo bench.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    profile_parent = _build_profile_parser()
    run_parent = _build_run_parser()

    commands = [
        (
            "run",
            "Build examples, run tests, and benchmark release builds.",
            handle_run,
            [parent, profile_parent, run_parent],
        ),
        ("plan", "Show the steps `run` would execute.", handle_plan, [parent, profile_parent]),
        ("info", "Display environment and config info.", handle_info, [parent]),
    ]

    for name, help_text, handler, parents in commands:
        parser = subparsers.add_parser(name, parents=parents, help=help_text)
        parser.set_defaults(func=handler)


def main() -> None:
    """
    Main CLI entrypoint, referenced by pyproject.toml's [project.scripts].

    Parses the command line, calls the subcommand handler and exits with its
    return code. Without a subcommand, prints help and exits with USER_ERROR.
    """
    root_parser = argparse.ArgumentParser(
        prog="rustci",
        description="rustci: build, test and benchmark orchestration for Rust crates.",
        parents=[_build_global_parser()],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, _build_global_parser(suppress_defaults=True))

    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

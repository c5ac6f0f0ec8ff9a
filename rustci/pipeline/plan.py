# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Step planning: turns a profile and a config into the ordered list of cargo
commands to run.

The plan is always:
  1. cargo build --examples <profile>   (fatal)
  2. cargo test <profile>               (suppressed unless configured otherwise)
  3. cargo bench                        (fatal, release profile only)

The profile is passed through untouched. An empty profile adds no argument at
all, so the default run is a plain debug build.
"""

from collections.abc import Mapping
from typing import Optional

from rustci.config.schema import PipelineConfig
from rustci.pipeline.models import FailurePolicy, Step

PROFILE_ENV_VAR = "PROFILE"

BUILD_STEP = "build"
TEST_STEP = "test"
BENCH_STEP = "bench"


def resolve_profile(
    cli_profile: Optional[str],
    environ: Mapping[str, str],
) -> str:
    """
    Pick the profile for this run.

    An explicit command-line value wins, even when it is the empty string.
    Otherwise $PROFILE is used, and with neither the profile is empty.
    """
    if cli_profile is not None:
        return cli_profile
    return environ.get(PROFILE_ENV_VAR, "")


def is_release(profile: str, release_flag: str = "--release") -> bool:
    """Exact string match; no trimming or case folding."""
    return profile == release_flag


def _profile_args(profile: str) -> tuple[str, ...]:
    return (profile,) if profile else ()


def build_plan(profile: str, config: Optional[PipelineConfig] = None) -> list[Step]:
    """Return the steps to run for `profile`, in execution order."""
    config = config or PipelineConfig()
    cargo = config.cargo
    test_policy = (
        FailurePolicy.FATAL if config.fail_on_test_failure else FailurePolicy.SUPPRESSED
    )

    steps = [
        Step(
            name=BUILD_STEP,
            argv=(cargo, "build", "--examples", *_profile_args(profile)),
            policy=FailurePolicy.FATAL,
        ),
        Step(
            name=TEST_STEP,
            argv=(cargo, "test", *_profile_args(profile)),
            policy=test_policy,
        ),
    ]

    if is_release(profile, config.release_flag):
        steps.append(Step(name=BENCH_STEP, argv=(cargo, "bench"), policy=FailurePolicy.FATAL))

    return steps

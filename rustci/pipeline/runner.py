# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Sequential step runner.

Each step is a plain blocking subprocess.run: no captured output (cargo
writes straight to the inherited console), no timeout, no shell=True. The
next step starts only after the previous one has exited.

Exit statuses follow what a shell would report, so the tool is a drop-in
replacement for a `set -e` CI script:
  - executable not found        -> 127
  - found but cannot be started -> 126
  - killed by signal N          -> 128 + N
"""

import subprocess
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Optional

from rustci.logging.logger import get_logger
from rustci.pipeline.models import FailurePolicy, PipelineResult, Step, StepResult

logger = get_logger(__name__)

COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126
SIGNAL_EXIT_BASE = 128


def normalize_exit_code(returncode: int) -> int:
    """Map subprocess's negative "killed by signal" codes to shell-style ones."""
    if returncode < 0:
        return SIGNAL_EXIT_BASE - returncode
    return returncode


def run_step(
    step: Step,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> StepResult:
    """Run one step to completion and record its exit status."""
    logger.info(
        "Step started",
        extra={"step": step.name, "command": step.command_line, "cwd": str(cwd or ".")},
    )
    start = time.monotonic()

    try:
        completed = subprocess.run(
            list(step.argv),
            env=dict(env) if env is not None else None,
            cwd=str(cwd) if cwd is not None else None,
            check=False,
        )
        exit_code = normalize_exit_code(completed.returncode)
    except FileNotFoundError:
        logger.error(
            "Executable not found",
            extra={"step": step.name, "executable": step.argv[0]},
        )
        exit_code = COMMAND_NOT_FOUND
    except PermissionError:
        logger.error(
            "Executable is not runnable",
            extra={"step": step.name, "executable": step.argv[0]},
        )
        exit_code = COMMAND_NOT_EXECUTABLE
    except OSError as err:
        logger.error(
            "Executable could not be started",
            extra={"step": step.name, "executable": step.argv[0], "error": str(err)},
        )
        exit_code = COMMAND_NOT_EXECUTABLE

    elapsed = time.monotonic() - start
    logger.info(
        "Step finished",
        extra={
            "step": step.name,
            "exit_code": exit_code,
            "elapsed_seconds": round(elapsed, 3),
        },
    )
    return StepResult(step=step, exit_code=exit_code, elapsed_seconds=elapsed)


def run_pipeline(
    steps: Sequence[Step],
    profile: str = "",
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
    dry_run: bool = False,
) -> PipelineResult:
    """
    Run `steps` in order and decide the overall exit status.

    A failing FATAL step ends the run with its status; later steps are never
    started. A failing SUPPRESSED step is logged and otherwise ignored.
    """
    if dry_run:
        for step in steps:
            logger.info(
                "Dry run, would run step",
                extra={"step": step.name, "command": step.command_line, "policy": step.policy.value},
            )
        return PipelineResult(profile=profile, exit_code=0, dry_run=True)

    results: list[StepResult] = []
    for step in steps:
        result = run_step(step, env=env, cwd=cwd)
        results.append(result)

        if result.success:
            continue

        if step.policy is FailurePolicy.SUPPRESSED:
            logger.warning(
                "Step failed, continuing",
                extra={"step": step.name, "exit_code": result.exit_code},
            )
            continue

        logger.error(
            "Step failed, stopping",
            extra={"step": step.name, "exit_code": result.exit_code},
        )
        return PipelineResult(profile=profile, exit_code=result.exit_code, results=tuple(results))

    logger.info(
        "Pipeline complete",
        extra={
            "profile": profile,
            "steps": [result.step.name for result in results],
            "suppressed_failures": [
                result.step.name for result in results if result.suppressed
            ],
        },
    )
    return PipelineResult(profile=profile, exit_code=0, results=tuple(results))

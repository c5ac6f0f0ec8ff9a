# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for the build pipeline.

Everything the planner and runner pass around. They're frozen dataclasses:
a step's command line is fixed once planned, and results are records of what
already happened.
"""

import enum
import shlex
from dataclasses import dataclass, field
from typing import Optional


class FailurePolicy(enum.Enum):
    """What a non-zero exit status of a step means for the whole run."""

    FATAL = "fatal"
    SUPPRESSED = "suppressed"


@dataclass(frozen=True)
class Step:
    """One external command in the plan."""

    name: str
    argv: tuple[str, ...]
    policy: FailurePolicy = FailurePolicy.FATAL

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class StepResult:
    """What came back from running a step."""

    step: Step
    exit_code: int
    elapsed_seconds: float

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def suppressed(self) -> bool:
        """True when the step failed but its policy says to carry on."""
        return not self.success and self.step.policy is FailurePolicy.SUPPRESSED


@dataclass(frozen=True)
class PipelineResult:
    """
    The outcome of a whole run.

    `results` holds only the steps that actually ran, in order. `exit_code`
    is the status the process should exit with: zero, or the status of the
    first fatal step that failed.
    """

    profile: str
    exit_code: int
    results: tuple[StepResult, ...] = field(default_factory=tuple)
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def executed_steps(self) -> list[str]:
        return [result.step.name for result in self.results]

    @property
    def failed_step(self) -> Optional[StepResult]:
        for result in self.results:
            if not result.success and not result.suppressed:
                return result
        return None

    @property
    def suppressed_failures(self) -> list[StepResult]:
        return [result for result in self.results if result.suppressed]

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exit codes the CLI uses for its own failures.

These only apply before the first step is spawned. Once steps run, a failing
fatal step's status is passed through unchanged instead.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""rustci: build, test and benchmark orchestration for Rust crates."""

__version__ = "0.1.0"

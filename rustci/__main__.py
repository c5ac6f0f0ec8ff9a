# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

from rustci.cli.main import main

if __name__ == "__main__":
    main()

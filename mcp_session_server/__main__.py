# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Entry point for running the MCP session server with ``python -m``."""

import sys

from .server import main

if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""
Entry point for targetd-provisioner CLI tool.
"""

import sys

from targetd_provisioner.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())

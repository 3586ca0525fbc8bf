#!/usr/bin/env python3
"""
Laravel Forge Deployment Monitor

Triggers a deployment for one Forge site and waits until it finishes,
printing the deployment log as it grows. Exits 0 on success, 1 otherwise.

This script supports running directly from a source checkout that uses a
src/ layout. For production use, prefer installing the project and using
the provided `forge-deploy` console script.
"""

import os
import sys

# Add src/ to path to import modules directly
REPO_ROOT = os.path.dirname(os.path.abspath(__file__))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from cli import main

if __name__ == "__main__":
    sys.exit(main())

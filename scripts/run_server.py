#!/usr/bin/env python3
"""Run the SpaceBeacon status server. Usage: scripts/run_server.py [config.yaml] [--debug]"""

import os
import sys

# Project root: always resolve relative to script location, not cwd
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)
os.chdir(_PROJECT_ROOT)  # Ensure config paths resolve from project root

from spacebeacon.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())

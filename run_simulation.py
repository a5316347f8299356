#!/usr/bin/env python3
"""Run the holdfast simulation headless and print a summary.

Usage:
    python3 run_simulation.py [--seconds 40] [--delta 0.5] [--state-file s.json --save]
"""

import sys
from pathlib import Path

# Ensure src/ is on path when run from a checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

from holdfast.runner import main


if __name__ == "__main__":
    sys.exit(main())

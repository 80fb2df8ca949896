#!/usr/bin/env python3
"""timerkit entry point.

Run with:
    python main.py --duration 30
    python -m timerkit --duration 30
"""

import sys

from timerkit.__main__ import main


if __name__ == "__main__":
    sys.exit(main())

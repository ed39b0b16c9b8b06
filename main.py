#!/usr/bin/env python3
"""MultiClock — entry point.

Run with:
    python main.py
    python -m multiclock
"""

from multiclock.__main__ import main


if __name__ == "__main__":
    main()

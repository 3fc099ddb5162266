#!/usr/bin/env python3
"""Run the tabu search with ``config.yaml`` from the current directory."""

import sys

from twt.main import main

if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3

import sys

from skirmish.cli import main


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nSimulation interrupted by user")
        sys.exit(130)

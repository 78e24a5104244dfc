"""Allows running the build driver with ``python -m perfetto_build``"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())

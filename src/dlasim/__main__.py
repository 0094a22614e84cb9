"""Allow ``python -m dlasim``."""

import sys

from dlasim.cli import main

sys.exit(main())

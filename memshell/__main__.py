"""Allow ``python -m memshell``."""

import sys

from .terminal import main

sys.exit(main())

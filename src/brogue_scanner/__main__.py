"""Allow ``python -m brogue_scanner``."""

import sys

from brogue_scanner.cli import main


sys.exit(main())

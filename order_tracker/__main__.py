"""Allow ``python -m order_tracker``."""

import sys

from order_tracker.cli import main

sys.exit(main())

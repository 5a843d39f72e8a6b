"""Allow ``python -m crcsfv``."""

import sys

from crcsfv.sfv.cli import main

sys.exit(main())

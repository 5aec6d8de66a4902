"""Allow ``python -m mindmapper``."""

import sys

from mindmapper.cli import main

sys.exit(main())

"""src/mycurl/__main__.py"""

import sys

from mycurl.cli import main

sys.exit(main())

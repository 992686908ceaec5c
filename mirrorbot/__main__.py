"""python -m mirrorbot"""

import sys

from mirrorbot.launcher import main

sys.exit(main())

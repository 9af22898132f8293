import sys

from noteblocks.cli import main

sys.exit(main())

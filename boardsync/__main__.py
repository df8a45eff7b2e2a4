import sys

from boardsync.cli import main

sys.exit(main())

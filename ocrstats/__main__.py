import sys

from ocrstats.cli import main

sys.exit(main())

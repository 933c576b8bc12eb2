import sys

from epdasset.cli import main

sys.exit(main())

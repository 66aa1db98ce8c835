import sys

from extree.cli import main

sys.exit(main())

import sys

from athenacli.cli import main

sys.exit(main())

import sys

from plotter_accounts.cli.shell import main

sys.exit(main())

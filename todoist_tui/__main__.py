import sys

from todoist_tui.cli import main

sys.exit(main())

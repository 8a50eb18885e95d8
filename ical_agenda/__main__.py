"""Entry point for `python -m ical_agenda`."""

import sys

from .cli import main

sys.exit(main())

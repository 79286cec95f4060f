"""Allow `python -m photostrip`."""

from photostrip.cli import main

raise SystemExit(main())

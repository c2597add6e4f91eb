"""Allow ``python -m sumcheck``."""

from .main import main

raise SystemExit(main())

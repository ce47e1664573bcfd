"""Module executed when running ``python -m catalogsync``."""

from __future__ import annotations

import sys

from app.main import main


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    sys.exit(main())

"""Development entrypoint for the regionmap command line."""

from __future__ import annotations

from regionmap.main import main

if __name__ == "__main__":
    raise SystemExit(main())

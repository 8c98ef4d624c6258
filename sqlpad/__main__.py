"""Run the editor with `python -m sqlpad`."""

from __future__ import annotations

from .app import main

if __name__ == "__main__":
    main()

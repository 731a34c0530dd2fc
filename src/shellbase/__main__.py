"""Run the stock shell with ``python -m shellbase``."""

from __future__ import annotations

from shellbase.cli import main

if __name__ == "__main__":
    main()

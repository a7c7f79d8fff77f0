"""
labelstats CLI entry point.

This module enables running labelstats as a module:
    python -m labelstats subject|template [options]
"""

from labelstats.cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())

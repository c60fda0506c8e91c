"""
Package entry point.

Allows running the application via:

    python -m crntracker

This simply forwards execution to crntracker.cli.main().
"""

from crntracker.cli import main

if __name__ == "__main__":
    main()

"""CLI entry point - wrapper for running from a source checkout

Usage: python cli.py https://host/v1/sync
"""

from cli.main import main

if __name__ == "__main__":
    main()

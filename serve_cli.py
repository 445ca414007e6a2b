"""Sync server entry point - wrapper for running from a source checkout"""

from cli.serve import main

if __name__ == "__main__":
    main()

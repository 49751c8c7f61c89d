"""
Entry point for running Country Info as a module.

This allows users to run the CLI using:
    python -m country_info [options]
"""

from country_info.cli.app import main

if __name__ == "__main__":
    main()

"""
Entry point for the PE Architecture Scanner.
Every invocation is forwarded to the CLI (see `python main.py --help`).
"""

import sys


def main():
    from pearch.cli import commands

    sys.exit(commands.main())


if __name__ == "__main__":
    main()

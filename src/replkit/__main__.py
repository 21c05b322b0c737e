"""Entry point for running replkit as a module."""

# cli.main() is the startup error boundary; CommandProgram.run() is the
# error boundary for the interactive loop.

import sys

from replkit.cli import main

if __name__ == "__main__":
    sys.exit(main())

"""Entry point for running nsflatten as a module."""

import sys

from nsflatten.cli_entry import main

if __name__ == "__main__":
    sys.exit(main())

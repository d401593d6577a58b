"""Main entry point for Pocket Lisp when run as a module."""

import sys

from plisp.plisp_cli import main

if __name__ == '__main__':
    sys.exit(main())

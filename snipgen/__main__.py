"""Allow ``python -m snipgen``."""

import sys

from .cli import main

main(sys.argv[1:])

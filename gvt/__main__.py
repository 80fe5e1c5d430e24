"""Entry point for running gvt via: python3 -m gvt <command>"""

import sys

from .app.cli import main


if __name__ == "__main__":
    sys.exit(main())

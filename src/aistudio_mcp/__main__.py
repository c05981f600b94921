"""Allow ``python -m aistudio_mcp``."""

import sys

from aistudio_mcp.cli import main

if __name__ == "__main__":
    sys.exit(main())

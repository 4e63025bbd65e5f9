"""Entry point for running the designer as a module: python -m docdesigner"""

import sys
from .ui import main

if __name__ == "__main__":
    sys.exit(main())

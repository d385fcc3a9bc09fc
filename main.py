# main.py

import sys

from mandelbmp.cli import main

if __name__ == "__main__":
    sys.exit(main())

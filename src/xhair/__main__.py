"""
xhair CLI Entry Point

Allows running the package as a module: python -m xhair
"""

from xhair.cli import main

if __name__ == "__main__":
    main()

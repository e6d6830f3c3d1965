"""Module entrypoint for ``python -m kmipexplorer``.

All argument parsing and runtime setup happen in ``kmipexplorer.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()

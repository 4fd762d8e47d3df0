"""Module entrypoint for ``python -m devdash``."""

from .cli import main


if __name__ == "__main__":
    main()

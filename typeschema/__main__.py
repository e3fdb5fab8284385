"""Entry point for running typeschema as a module: python -m typeschema."""

from typeschema.cli import main

if __name__ == "__main__":
    main()

"""Entry point for the typeschema CLI when run as python -m typeschema.cli."""

if __name__ == "__main__":
    from typeschema.cli.main import main

    main()

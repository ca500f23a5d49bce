"""Entry point for `python -m htmlfield` and `htmlfield` CLI."""

from htmlfield.cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()

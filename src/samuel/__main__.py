from samuel.cli.cli import cli


def main() -> None:
    """CLI entry point used by the `samuel` console script."""
    cli()


if __name__ == "__main__":
    main()

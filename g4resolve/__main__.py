"""Main entry point for g4resolve package."""

import sys


def main():
    """Main function for g4resolve."""
    from g4resolve.cli.main import cli

    try:
        return cli()
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())

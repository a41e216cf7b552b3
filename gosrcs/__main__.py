"""Main entry point for gosrcs package."""

import sys


def main():
    """Main function for gosrcs."""
    from gosrcs.cli.main import cli

    try:
        return cli()
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())

"""Entry point for `python -m photoframe` and the `photoframe` console script."""

import asyncio
import sys

from photoframe.cli import main_entry


def main() -> None:
    try:
        exit_code = asyncio.run(main_entry())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("Operation cancelled by user")
        sys.exit(130)


if __name__ == "__main__":
    main()

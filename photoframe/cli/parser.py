"""Command-line argument parsing for the photo frame."""

import argparse
from pathlib import Path

from .. import __version__

LOG_LEVELS = ["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"]


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser.

    Returns:
        Configured ArgumentParser

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["--prepare", "in.jpg", "out.png"])
    """
    parser = argparse.ArgumentParser(
        prog="photoframe",
        description="Photo Frame - e-paper slideshow for IT8951 grayscale panels",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Run the slideshow on the panel (default)
  %(prog)s --simulate                   # Run the slideshow rendering to a PNG file
  %(prog)s --prepare photo.jpg out.png  # Prepare one photo for the panel
  %(prog)s --import photo.jpg --name Beach  # Prepare a photo and add it to the catalog
  %(prog)s --clear                      # Wipe the panel to white
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show version information"
    )
    parser.add_argument(
        "--config", type=Path, metavar="PATH", help="YAML configuration file"
    )

    # Modes
    mode_group = parser.add_argument_group("modes", "Operation modes (default: --run)")
    modes = mode_group.add_mutually_exclusive_group()
    modes.add_argument("--run", action="store_true", help="Run the slideshow")
    modes.add_argument(
        "--prepare",
        nargs=2,
        type=Path,
        metavar=("SOURCE", "DESTINATION"),
        help="Prepare SOURCE for the panel and write the artifact to DESTINATION",
    )
    modes.add_argument(
        "--import",
        dest="import_path",
        type=Path,
        metavar="SOURCE",
        help="Prepare SOURCE into the photo root and register it in the catalog",
    )
    modes.add_argument("--clear", action="store_true", help="Initialize the panel and clear it")

    mode_group.add_argument("--name", help="Display name for --import (defaults to the file name)")

    # Display
    display_group = parser.add_argument_group("display", "Panel options")
    display_group.add_argument(
        "--simulate",
        action="store_true",
        help="Render to a PNG file instead of driving the panel",
    )

    # Logging
    logging_group = parser.add_argument_group("logging", "Logging configuration options")
    logging_group.add_argument(
        "--log-level", choices=LOG_LEVELS, help="Set both console and file log levels"
    )
    logging_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    logging_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show errors on console (sets console level to ERROR)",
    )
    logging_group.add_argument(
        "--log-dir", type=Path, help="Write log files to this directory"
    )
    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console output"
    )

    return parser

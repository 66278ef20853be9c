"""Command-line interface for the photo frame."""

from typing import Optional

from ..config.settings import get_settings
from ..utils.logging import apply_command_line_overrides, setup_logging
from .modes import (
    run_clear_mode,
    run_import_mode,
    run_prepare_mode,
    run_slideshow_mode,
)
from .parser import create_parser


async def main_entry(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, configure settings and logging, and run the selected mode.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.name and not args.import_path:
        parser.error("--name can only be used with --import")

    settings = get_settings(config_file=args.config) if args.config else get_settings()
    apply_command_line_overrides(settings, args)
    setup_logging(settings)

    if args.prepare:
        return await run_prepare_mode(args, settings)
    if args.import_path:
        return await run_import_mode(args, settings)
    if args.clear:
        return await run_clear_mode(args, settings)
    return await run_slideshow_mode(args, settings)


__all__ = ["create_parser", "main_entry"]

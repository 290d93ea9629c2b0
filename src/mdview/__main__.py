"""Entry point for mdview."""

import argparse
import logging
import sys
from pathlib import Path

from .app import run_app
from .config import Config


def _configure_logging(config: Config, debug: bool) -> None:
    """Send logs to a file; the terminal belongs to the UI."""
    config.log_file.parent.mkdir(parents=True, exist_ok=True)
    level = logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        filename=config.log_file,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for mdview."""
    p = argparse.ArgumentParser(prog="mdview", description="Terminal Markdown viewer")
    p.add_argument("path", nargs="?", default=None,
                   help="Markdown file to open")
    p.add_argument("--history-dir", type=Path, default=None,
                   help="Directory for history.json (overrides config)")
    p.add_argument("-d", "--debug", action="store_true", default=False,
                   help="Enable debug logging")
    args = p.parse_args(argv)

    try:
        config = Config.load()
        if args.history_dir is not None:
            config.history_directory = args.history_dir.expanduser()

        _configure_logging(config, args.debug)

        run_app(config, args.path)

        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

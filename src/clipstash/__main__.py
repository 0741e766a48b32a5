import argparse
import logging
import sys

from clipstash.config import DB_PATH, HISTORY_KEY, LOG_PATH, PINNED_KEY
from clipstash.storage import KeyValueStore
from clipstash.utils import ensure_dirs


def setup_logging(level: str = "INFO") -> None:
    ensure_dirs()
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_PATH),
            logging.StreamHandler(sys.stderr),
        ],
    )


def clear_stored_items() -> int:
    """Remove stored history and pinned items. Settings are kept."""
    ensure_dirs()
    with KeyValueStore(DB_PATH) as storage:
        storage.delete(HISTORY_KEY)
        storage.delete(PINNED_KEY)
    print("Clipboard history and pinned items cleared.")
    return 0


def run_app(log_level: str = "INFO"):
    """Run the Clipstash menu bar application."""
    setup_logging(log_level)

    from clipstash.app import ClipstashApp

    app = ClipstashApp()
    app.run()


def main():
    parser = argparse.ArgumentParser(
        description="Clipstash - Clipboard history manager for macOS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  (none)      Run Clipstash in the menu bar
  clear       Delete stored history and pinned items

Examples:
  clipstash                     # Run in foreground
  clipstash --log-level DEBUG   # Run with verbose logging
  clipstash clear               # Wipe stored history
""",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["clear"],
        help="Command to run",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )

    args = parser.parse_args()

    if args.command == "clear":
        sys.exit(clear_stored_items())
    else:
        run_app(args.log_level)


if __name__ == "__main__":
    main()

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core import MediaHygieneApp
from .exceptions import InvalidArgumentError, MediaHygieneError
from .metadata.extract import MetadataExtractor
from .verification.integrity import MediaIntegrityChecker
from . import config

def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, if given, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)

class ArgumentParser(argparse.ArgumentParser):
    """Exits with status 1 on bad arguments, like the other fatal errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\nUse --help for usage information.\n")

def parse_args(argv: Optional[List[str]] = None):
    p = ArgumentParser(
        prog="media-hygiene",
        description="Media hygiene: rename by capture time, verify integrity, restore from backup",
    )
    sub = p.add_subparsers(dest="command")

    r = sub.add_parser("rename", help="Rename images, sidecars and videos after their capture time")
    r.add_argument("--dir", type=Path, default=None, help="Directory containing the media files")
    r.add_argument("--undo", action="store_true", help="Undo the last rename operation")
    r.add_argument("--dry-run", action="store_true", help="Journal the renames without modifying disk")
    r.add_argument("--rename-stranded-videos", action="store_true",
                   help="Rename videos paired with an image that has no capture time on their own date")
    r.add_argument("--log-file", type=Path, default=Path(config.RENAME_LOG), help="Rename journal path")
    r.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    v = sub.add_parser("verify", help="Detect corrupt images and videos, store CRC checksums")
    v.add_argument("--dir", type=Path, default=None, help="Directory containing the media files")
    v.add_argument("--no-verify", action="store_true",
                   help="Skip crc verification of files that have a corresponding crc file")
    v.add_argument("--output", type=Path, default=Path(config.CORRUPT_FILES_LOG), help="Corrupt file list path")
    v.add_argument("-v", "--verbose", action="store_true", help="Echo crc matches and creation of crc files")

    b = sub.add_parser("backsync", help="Restore corrupt files from a known good backup")
    b.add_argument("--primary-dir", type=Path, default=None, help="Directory files will be restored to")
    b.add_argument("--backup-dir", type=Path, default=None, help="Directory files will be restored from")
    b.add_argument("--dry-run", action="store_true", help="Show what would be restored without restoring")
    b.add_argument("--input", type=Path, default=Path(config.CORRUPT_FILES_LOG), help="Corrupt file list path")
    b.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p, p.parse_args(argv)

def require_dir(value: Optional[Path], option: str) -> Path:
    if value is None:
        raise InvalidArgumentError(f"{option} option is required. Use --help for usage information.")
    if not value.is_dir():
        raise InvalidArgumentError(f"Directory {value} does not exist.")
    return value.resolve()

def run_rename(args) -> int:
    if args.undo:
        app = MediaHygieneApp(rename_log=args.log_file)
        app.undo()
        return 0

    root = require_dir(args.dir, "--dir")
    reader = MetadataExtractor()
    reader.ensure_available()

    app = MediaHygieneApp(rename_log=args.log_file, reader=reader)
    app.rename(
        root,
        dry_run=args.dry_run,
        rename_stranded_videos=args.rename_stranded_videos,
        progress=not args.verbose,
    )
    return 0

def run_verify(args) -> int:
    root = require_dir(args.dir, "--dir")
    checker = MediaIntegrityChecker()
    checker.ensure_available()

    app = MediaHygieneApp(corrupt_list=args.output, checker=checker)
    summary = app.verify(root, verify_checksums=not args.no_verify, progress=not args.verbose)
    if summary.has_corrupt:
        logging.info("Tip: Use 'media-hygiene backsync' to restore corrupt files from backup.")
        return 1
    return 0

def run_backsync(args) -> int:
    primary = require_dir(args.primary_dir, "--primary-dir")
    backup = require_dir(args.backup_dir, "--backup-dir")

    app = MediaHygieneApp(corrupt_list=args.input)
    app.backsync(primary, backup, dry_run=args.dry_run)
    return 0

COMMANDS = {
    "rename": run_rename,
    "verify": run_verify,
    "backsync": run_backsync,
}

def main(argv: Optional[List[str]] = None) -> int:
    parser, args = parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    log_file = Path(config.BACKSYNC_LOG) if args.command == "backsync" else None
    setup_logging(args.verbose, log_file)

    try:
        return COMMANDS[args.command](args)
    except MediaHygieneError as e:
        logging.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1

if __name__ == "__main__":
    sys.exit(main())

"""Pizza delivery store management CLI.

Provides commands to create and drop the document store collections and to
read rotated log archives.

Usage:
    python src/manage.py setup-store                  # Create all collections
    python src/manage.py drop-store                   # Remove all collections
    python src/manage.py decompress-log <archive>     # Print a rotated log archive
"""

import argparse
import sys

from maintenance.log_rotation import LogArchive
from shared.config import Settings, get_settings
from shared.errors import NotFound
from shared.store import COLLECTIONS, DocumentStore


def setup_store(settings: Settings, collections=None):
    """Create the collection directories for the specified (or all) collections."""
    targets = collections or list(COLLECTIONS)
    store = DocumentStore(settings.data_dir)
    for name in targets:
        print(f"Creating {name} collection...")
    store.ensure_collections(*targets)
    print("Done.")


def drop_store(settings: Settings, collections=None):
    """Remove the specified (or all) collections and every document in them."""
    targets = collections or list(COLLECTIONS)
    store = DocumentStore(settings.data_dir)
    for name in targets:
        print(f"Dropping {name} collection...")
    store.drop_collections(*targets)
    print("Done.")


def decompress_log(settings: Settings, archive_name: str) -> str:
    return LogArchive(settings.log_dir).decompress(archive_name)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Pizza delivery store management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-store", help="Create all collections")
    setup_parser.add_argument(
        "--collection",
        choices=list(COLLECTIONS),
        nargs="*",
        help="Specific collection(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-store", help="Remove all collections")
    drop_parser.add_argument(
        "--collection",
        choices=list(COLLECTIONS),
        nargs="*",
        help="Specific collection(s) to drop (default: all)",
    )

    decompress_parser = subparsers.add_parser("decompress-log", help="Print the contents of a rotated log archive")
    decompress_parser.add_argument("archive", help="Archive file name inside the log directory")

    args = parser.parse_args(argv)
    settings = get_settings()

    if args.command == "setup-store":
        setup_store(settings, args.collection)
    elif args.command == "drop-store":
        drop_store(settings, args.collection)
    elif args.command == "decompress-log":
        try:
            sys.stdout.write(decompress_log(settings, args.archive))
        except NotFound as exc:
            print(exc, file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

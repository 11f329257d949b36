# src/main.py — v2
"""CLI entry point — list, show, add, remove, import commands.

Usage:
    playerbook list [--friends | --enemies]
    playerbook show <uuid>
    playerbook add <name> [--enemy]
    playerbook remove <uuid>
    playerbook import <file> [--uuids] [--enemy]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from uuid import UUID

from playerbook.config.settings import ConfigurationError, Settings, load_settings
from playerbook.core.models import Affinity, ImportResult, Profile, ResolutionFailure
from playerbook.store.relationship_store import RelationshipStore
from playerbook.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from playerbook.api.facade import open_store

    try:
        overrides = {"friends_file": args.file} if args.file else {}
        settings = load_settings(**overrides)
    except (ConfigurationError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    _setup_logging(args.verbose, settings)

    try:
        with open_store(settings) as store:
            return args.func(args, store)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="playerbook",
        description=f"playerbook v{__version__} — friends and enemies list",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--file", type=Path, default=None,
        help="Friends file (default: FRIENDS_FILE or ~/.friends.json)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- list ---
    p_list = subparsers.add_parser("list", help="List classified players")
    group = p_list.add_mutually_exclusive_group()
    group.add_argument("--friends", action="store_true", help="Friends only")
    group.add_argument("--enemies", action="store_true", help="Enemies only")
    p_list.set_defaults(func=_cmd_list)

    # --- show ---
    p_show = subparsers.add_parser("show", help="Show a player's relationship")
    p_show.add_argument("uuid", type=UUID, help="Player UUID")
    p_show.add_argument(
        "--refresh", action="store_true",
        help="Resolve again even if a lookup is cached",
    )
    p_show.set_defaults(func=_cmd_show)

    # --- add ---
    p_add = subparsers.add_parser("add", help="Classify a player by name")
    p_add.add_argument("name", help="In-game name")
    p_add.add_argument("--enemy", action="store_true", help="Add as enemy")
    p_add.set_defaults(func=_cmd_add)

    # --- remove ---
    p_remove = subparsers.add_parser("remove", help="Remove a classification")
    p_remove.add_argument("uuid", type=UUID, help="Player UUID")
    p_remove.set_defaults(func=_cmd_remove)

    # --- import ---
    p_import = subparsers.add_parser(
        "import", help="Import players from a file with one entry per line",
    )
    p_import.add_argument("source", type=Path, help="Name or UUID list")
    p_import.add_argument(
        "--uuids", action="store_true",
        help="Entries are UUIDs instead of names",
    )
    p_import.add_argument("--enemy", action="store_true", help="Import as enemies")
    p_import.set_defaults(func=_cmd_import)

    return parser


def _cmd_list(args: argparse.Namespace, store: RelationshipStore) -> int:
    if args.friends:
        profiles = store.only_friends()
    elif args.enemies:
        profiles = store.only_enemies()
    else:
        profiles = store.all_classified()
    for profile in sorted(profiles, key=lambda p: p.name.lower()):
        print(_format_profile(profile))
    return 0


def _cmd_show(args: argparse.Namespace, store: RelationshipStore) -> int:
    print(_format_profile(store.query(args.uuid, refresh=args.refresh)))
    return 0


def _cmd_add(args: argparse.Namespace, store: RelationshipStore) -> int:
    affinity = Affinity.ENEMY if args.enemy else Affinity.FRIEND
    results = store.import_by_name([args.name], affinity=affinity)
    return _report(results)


def _cmd_remove(args: argparse.Namespace, store: RelationshipStore) -> int:
    profile = store.declassify(args.uuid)
    if profile is None:
        print(f"{args.uuid} is not classified", file=sys.stderr)
        return 1
    print(f"Removed {profile.name or args.uuid}")
    return 0


def _cmd_import(args: argparse.Namespace, store: RelationshipStore) -> int:
    entries = _read_entries(args.source)
    affinity = Affinity.ENEMY if args.enemy else Affinity.FRIEND
    if args.uuids:
        identities, rejected = _parse_identities(entries)
        results = rejected + store.import_by_identity(identities, affinity=affinity)
    else:
        results = store.import_by_name(entries, affinity=affinity)
    return _report(results)


def _read_entries(path: Path) -> list[str]:
    """Non-empty, non-comment lines of a list file."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return [s for s in (line.strip() for line in lines) if s and not s.startswith("#")]


def _parse_identities(entries: list[str]) -> tuple[list[UUID], list[ImportResult]]:
    """Split list entries into UUIDs and failed results for unparseable lines."""
    identities: list[UUID] = []
    rejected: list[ImportResult] = []
    for entry in entries:
        try:
            identities.append(UUID(entry))
        except ValueError:
            logger.warning("Skipping %r: not a UUID", entry)
            rejected.append(ImportResult(
                key=entry,
                status="failed",
                failure=ResolutionFailure(kind="invalid", key=entry, message="not a UUID"),
            ))
    return identities, rejected


def _report(results: list[ImportResult]) -> int:
    imported = [r for r in results if r.ok]
    for r in results:
        if r.ok and r.profile is not None:
            print(f"+ {_format_profile(r.profile)}")
        else:
            print(f"! {r.key}: {r.failure}", file=sys.stderr)
    print(f"\nImported {len(imported)}/{len(results)}")
    return 0 if len(imported) == len(results) else 1


def _format_profile(profile: Profile) -> str:
    name = profile.name or "<unknown>"
    return f"{profile.affinity.value:8s} {name:16s} {profile.uuid}"


def _setup_logging(verbose: bool, settings: Settings) -> None:
    """Configure logging for CLI usage. ``-v`` overrides LOG_LEVEL."""
    from playerbook.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file or None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from crosslink.app import (
    build_catalog_fetcher,
    confirm,
    enrich_release_links,
    override_release_link,
    reject,
    resolve_smart_link,
    run_discovery,
    sync_state,
)
from crosslink.config.errors import ConfigurationError
from crosslink.config.logging import configure_logging
from crosslink.domain.matching import HomeArtistProfile
from crosslink.domain.model import CrosslinkError, DiscoveryCancelledError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from crosslink.domain.model import DSPLink


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cross-provider release links and artist matches")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    discover = commands.add_parser("discover", help="Discover the matching artist on a provider")
    discover.add_argument("profile_id", type=UUID)
    discover.add_argument("provider", help="Provider to search, e.g. deezer or spotify")
    discover.add_argument("--artist-name", help="Home artist name, used as extra evidence")
    discover.add_argument("--timeout", type=float, help="Give up after this many seconds")

    confirm_cmd = commands.add_parser("confirm", help="Confirm a match")
    confirm_cmd.add_argument("match_id", type=UUID)
    confirm_cmd.add_argument("--by", type=UUID, dest="confirmed_by", help="Confirming user id")

    reject_cmd = commands.add_parser("reject", help="Reject a match")
    reject_cmd.add_argument("match_id", type=UUID)
    reject_cmd.add_argument("--reason", help="Why the match is wrong")

    resolve = commands.add_parser("resolve", help="Resolve a smart link path to its target")
    resolve.add_argument("path", help="Smart link path such as /r/<release>--<profile>")

    link = commands.add_parser("link", help="Set a user override link on a release")
    link.add_argument("release_id", type=UUID)
    link.add_argument("provider")
    link.add_argument("url")

    enrich = commands.add_parser("enrich", help="Look up canonical links for a release")
    enrich.add_argument("release_id", type=UUID)
    enrich.add_argument(
        "--provider",
        action="append",
        dest="providers",
        default=None,
        help="Provider to query (repeatable, default: deezer)",
    )
    enrich.add_argument("--artist-name", help="Artist name for search fallback links")

    state = commands.add_parser("state", help="Show the match sync state for a provider")
    state.add_argument("profile_id", type=UUID)
    state.add_argument("provider")
    state.add_argument(
        "--disconnected",
        action="store_true",
        help="Treat the home provider as not connected",
    )
    return parser.parse_args(list(argv))


def _run(args: argparse.Namespace) -> int:  # noqa: PLR0911
    if args.command == "discover":
        result = run_discovery(
            profile_id=args.profile_id,
            provider=args.provider,
            home_artist=HomeArtistProfile(name=args.artist_name),
            timeout_seconds=args.timeout,
        )
        print(f"{result.provider}: {result.outcome}")
        if result.match is not None:
            match = result.match
            print(
                f"  {match.external_artist_name} ({match.external_artist_id}) "
                f"confidence={match.confidence:.2f} isrcs={match.matching_isrc_count} "
                f"status={match.status}"
            )
        return 0

    if args.command in {"confirm", "reject"}:
        transition = (
            confirm(args.match_id, confirmed_by=args.confirmed_by)
            if args.command == "confirm"
            else reject(args.match_id, reason=args.reason)
        )
        print(f"{args.command}: {transition.kind}")
        if transition.message:
            print(f"  {transition.message}")
        return 0 if transition.ok else 1

    if args.command == "resolve":
        resolution = resolve_smart_link(args.path)
        if resolution is None:
            print("Unknown smart link", file=sys.stderr)
            return 1
        if resolution.link is None:
            print("No provider link available")
            return 1
        print(resolution.link.url)
        return 0

    if args.command == "link":
        links = override_release_link(args.release_id, provider=args.provider, url=args.url)
        _print_links(links)
        return 0

    if args.command == "enrich":
        providers = args.providers or ["deezer"]
        links = enrich_release_links(
            args.release_id,
            fetchers=[build_catalog_fetcher(provider) for provider in providers],
            artist_name=args.artist_name,
        )
        _print_links(links)
        return 0

    projection = sync_state(
        args.profile_id,
        args.provider,
        home_connected=not args.disconnected,
    )
    coverage = projection.coverage
    print(
        f"{projection.state} "
        f"({coverage.with_provider_link}/{coverage.total_releases} releases linked)"
    )
    return 0


def _print_links(links: Sequence[DSPLink]) -> None:
    for link in links:
        print(f"  {link.provider:<14} {link.source:<9} {link.confidence:.2f} {link.url}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(argv if argv is not None else sys.argv[1:])
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        code = _run(parsed_args)
    except DiscoveryCancelledError as exc:
        print(f"Cancelled: {exc}", file=sys.stderr)
        sys.exit(1)
    except (ConfigurationError, CrosslinkError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def cli() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()

# src/main.py — v1
"""CLI entry point: fetch, prefetch, color and clear commands.

Usage:
    favicache fetch <url> [-o icon.png]
    favicache prefetch <links-file>
    favicache color <image-file>
    favicache clear
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from favicache.logging.logger import get_logger
from favicache.version import __version__

logger = get_logger("cli")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="favicache",
        description=f"favicache v{__version__}: favicon fetcher with a two-tier cache",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- fetch ---
    p_fetch = subparsers.add_parser("fetch", help="Fetch the icon for one URL or host")
    p_fetch.add_argument("identifier", help="Bookmark URL or bare host")
    p_fetch.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write the canonical PNG to this path",
    )
    p_fetch.set_defaults(func=_cmd_fetch)

    # --- prefetch ---
    p_prefetch = subparsers.add_parser(
        "prefetch", help="Warm the cache from a file with one URL per line",
    )
    p_prefetch.add_argument("links_file", type=Path, help="Path to links file")
    p_prefetch.set_defaults(func=_cmd_prefetch)

    # --- color ---
    p_color = subparsers.add_parser("color", help="Print the dominant color of an image")
    p_color.add_argument("image", type=Path, help="Path to image file")
    p_color.set_defaults(func=_cmd_color)

    # --- clear ---
    p_clear = subparsers.add_parser("clear", help="Delete every cached icon")
    p_clear.set_defaults(func=_cmd_clear)

    return parser


async def _cmd_fetch(args: argparse.Namespace) -> int:
    """Fetch one icon and optionally write it out."""
    from favicache.service.favicon_service import create_favicon_service

    async with create_favicon_service() as service:
        data = await service.fetch_icon(args.identifier)
        if data is None:
            print(f"No icon found for {args.identifier}")
            return 1

        color = service.extract_dominant_color(data)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(data)

    print(f"Icon for {args.identifier}:")
    print(f"  Bytes:  {len(data)}")
    if color is not None:
        print(f"  Color:  {color.hex}")
    if args.output is not None:
        print(f"  Output: {args.output}")
    return 0


async def _cmd_prefetch(args: argparse.Namespace) -> int:
    """Fetch icons for every URL listed in a file."""
    from favicache.service.favicon_service import create_favicon_service

    links_file: Path = args.links_file
    if not links_file.is_file():
        logger.error("File not found: %s", links_file)
        return 1

    identifiers = _read_links(links_file)
    async with create_favicon_service() as service:
        results = await service.prefetch_icons(identifiers)
        stats = service.stats

    found = sum(1 for data in results.values() if data is not None)
    print("\nPrefetch complete:")
    print(f"  Identifiers:  {len(results)}")
    print(f"  Found:        {found}")
    print(f"  Memory hits:  {stats.memory_hits}")
    print(f"  Disk hits:    {stats.disk_hits}")
    print(f"  Network:      {stats.network_fetches}")
    print(f"  Missing:      {stats.misses + stats.invalid_identifiers}")
    return 0


async def _cmd_color(args: argparse.Namespace) -> int:
    """Print the dominant color of a local image."""
    from favicache.imaging.color import extract_dominant_color_from_bytes

    image_path: Path = args.image
    if not image_path.is_file():
        logger.error("File not found: %s", image_path)
        return 1

    color = extract_dominant_color_from_bytes(image_path.read_bytes())
    if color is None:
        logger.error("Not a decodable image: %s", image_path)
        return 1

    r, g, b = color.as_rgb255()
    print(f"{color.hex} rgb({r}, {g}, {b})")
    return 0


async def _cmd_clear(args: argparse.Namespace) -> int:
    """Clear both cache tiers."""
    from favicache.service.favicon_service import create_favicon_service

    service = create_favicon_service()
    await service.clear_cache()
    print(f"Cleared {service.disk_store.root}")
    return 0


def _read_links(path: Path) -> list[str]:
    """Read non-empty, non-comment lines from a links file."""
    links: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        url = line.strip()
        if not url or url.startswith("#"):
            continue
        links.append(url)
    return links


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from favicache.config.settings import Settings
    from favicache.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())

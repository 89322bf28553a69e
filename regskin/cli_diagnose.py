"""Diagnostic CLI for regskin.

Talks to the configured registry directly, without the server, to check
reachability and inspect what the catalog browser would show.

Usage:
    python -m regskin.cli_diagnose health
    python -m regskin.cli_diagnose tree [PATH]
    python -m regskin.cli_diagnose tags team/app
    python -m regskin.cli_diagnose image team/app 1.0
"""

import argparse
import sys
from typing import Optional

import httpx

from regskin.catalog.snapshot import CatalogSnapshot
from regskin.catalog.tree import PathNode
from regskin.config import ConfigError, Settings, load_settings
from regskin.logging_config import configure_module_logging
from regskin.registry.client import Registry
from regskin.registry.exceptions import RegistryError

logger = configure_module_logging("cli_diagnose")


def check_registry_health(settings: Settings) -> Optional[int]:
    """Status code of the registry's /v2/ endpoint, None if unreachable."""
    try:
        response = httpx.get(
            f"{settings.registry_url}/v2/",
            timeout=5.0,
            verify=not settings.ignore_invalid_cert,
        )
        return response.status_code
    except httpx.HTTPError as e:
        logger.error(f"Registry health check failed: {e}")
        return None


def print_tree(node: PathNode, indent: str = "  "):
    for name in node.child_names():
        print(f"{indent}{name}")
        print_tree(node.children[name], indent + "  ")


def cmd_health(settings: Settings) -> int:
    """Check registry reachability."""
    print("\n" + "=" * 70)
    print("REGSKIN REGISTRY HEALTH CHECK")
    print("=" * 70)

    status = check_registry_health(settings)
    if status is None:
        print(f"  {settings.display_registry}: ✗ UNREACHABLE")
        print("=" * 70 + "\n")
        return 1

    # 401 means the registry is up and wants a token
    label = "✓ HEALTHY" if status in (200, 401) else f"✗ STATUS {status}"
    print(f"  {settings.display_registry}: {label}")
    print("=" * 70 + "\n")
    return 0 if status in (200, 401) else 1


def cmd_tree(settings: Settings, path: str = "") -> int:
    """Fetch the catalog and print it as a tree."""
    print("\n" + "=" * 70)
    print(f"CATALOG TREE: {settings.display_registry}/{path}")
    print("=" * 70)

    try:
        with Registry(settings.registry_config()) as registry:
            snapshot = CatalogSnapshot.from_repositories(registry.fetch_catalog())
    except RegistryError as e:
        print(f"\n✗ Error querying registry: {e}")
        print("=" * 70 + "\n")
        return 1

    node = snapshot.index.lookup(path)
    if node is None:
        print(f"\n✗ {path!r} is not in the catalog")
        print("=" * 70 + "\n")
        return 1

    print_tree(node)
    print(f"\n[Total Repositories: {len(snapshot)}]")
    print("=" * 70 + "\n")
    return 0


def cmd_tags(settings: Settings, path: str) -> int:
    """List the tags of one repository."""
    try:
        with Registry(settings.registry_config()) as registry:
            repositories = registry.fetch_catalog()
            tags = registry.fetch_tags(path, frozenset(repositories))
    except RegistryError as e:
        print(f"✗ Error: {e}")
        return 1

    if not tags.tags:
        print(f"(no tags for {path})")
        return 1
    for tag in tags.tags:
        print(tag)
    return 0


def cmd_image(settings: Settings, path: str, tag: str) -> int:
    """Show image metadata for one tag."""
    try:
        with Registry(settings.registry_config()) as registry:
            image = registry.fetch_manifest(path, tag)
    except RegistryError as e:
        print(f"✗ Error: {e}")
        logger.error(f"Image lookup failed: {e}", exc_info=True)
        return 1

    print(f"Image: {settings.display_registry}/{image.path}:{image.tag}")
    print(f"  Created: {image.created}")
    print(f"  Platform: {image.os}/{image.architecture}")
    if image.docker_version:
        print(f"  Docker version: {image.docker_version}")
    if image.labels:
        print("  Labels:")
        for key in sorted(image.labels):
            print(f"    {key}={image.labels[key]}")
    return 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="regskin diagnostics - inspect the registry catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  REGSKIN_REGISTRY_URL=https://registry.example.com python -m regskin.cli_diagnose health
  python -m regskin.cli_diagnose tree team
  python -m regskin.cli_diagnose tags team/app
  python -m regskin.cli_diagnose image team/app 1.0
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Diagnostic command")
    subparsers.add_parser("health", help="Check registry reachability")
    tree = subparsers.add_parser("tree", help="Print the catalog tree")
    tree.add_argument("path", nargs="?", default="", help="Subtree to print")
    tags = subparsers.add_parser("tags", help="List tags of a repository")
    tags.add_argument("path", help="Repository name")
    image = subparsers.add_parser("image", help="Show image metadata")
    image.add_argument("path", help="Repository name")
    image.add_argument("tag", help="Tag")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"✗ {e}")
        return 2

    if args.command == "health":
        return cmd_health(settings)
    elif args.command == "tree":
        return cmd_tree(settings, args.path)
    elif args.command == "tags":
        return cmd_tags(settings, args.path)
    elif args.command == "image":
        return cmd_image(settings, args.path, args.tag)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
